"""
Reconciliation between balance summaries and the transaction log.

Summaries are updated incrementally by every write and can drift from the
log under concurrent writers or manual corrections. This job reports the
drift; it only ever repairs the due = total - paid invariant.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Set, Tuple

from veg_ledger.errors import RecordStoreError
from veg_ledger.models.reports import BalanceDrift
from veg_ledger.models.schemas import PartyType, Transaction
from veg_ledger.repositories.party_repository import PartyRepository
from veg_ledger.services.ledger_projector import log_totals, party_transactions
from veg_ledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

TOLERANCE = 0.005  # Half a paisa


def reconcile_balances(store: LedgerStore) -> List[BalanceDrift]:
    """One BalanceDrift per summary that the log does not explain or that breaks the invariant."""
    drifts = []
    transactions = store.transactions
    for party_type in PartyType:
        for detail in store.payment_details(party_type):
            party = store.get_party(party_type, detail.party_id)
            if party is not None and party.is_walk_in:
                continue
            name = party.name if party else detail.party_name
            billed, paid = log_totals(party_transactions(transactions, name))
            drift = BalanceDrift(
                party_type=party_type,
                party_id=detail.party_id,
                party_name=name,
                total_amount=detail.total_amount,
                paid_amount=detail.paid_amount,
                due_amount=detail.due_amount,
                billed_in_log=billed,
                paid_in_log=paid,
            )
            if abs(drift.ghost_balance) > TOLERANCE or abs(drift.invariant_gap) > TOLERANCE:
                drifts.append(drift)

    logger.info(f"Reconciliation found {len(drifts)} summaries out of line with the log")
    return drifts


def find_bill_number_collisions(transactions: Iterable[Transaction]) -> List[Tuple[date, int, List[str]]]:
    """
    (date, bill number, parties) for bill numbers written by more than one batch.

    Line items of one bill share created_at, so two distinct timestamps under
    the same (date, bill number) mean two writers claimed the same number.
    """
    batches: Dict[Tuple[date, int], Set[str]] = defaultdict(set)
    parties: Dict[Tuple[date, int], Set[str]] = defaultdict(set)
    for t in transactions:
        if not t.is_billed or not t.bill_number:
            continue
        key = (t.date, t.bill_number)
        batches[key].add(t.created_at)
        parties[key].add(t.party)

    collisions = [
        (key[0], key[1], sorted(parties[key]))
        for key, stamps in batches.items()
        if len(stamps) > 1
    ]
    collisions.sort(key=lambda c: (c[0], c[1]))
    if collisions:
        logger.warning(f"Found {len(collisions)} bill numbers claimed by more than one bill")
    return collisions


class ReconciliationService:

    def __init__(self, store: LedgerStore, party_repo: PartyRepository):
        self.store = store
        self.party_repo = party_repo

    def run(self) -> List[BalanceDrift]:
        return reconcile_balances(self.store)

    async def repair_invariant(self, drifts: List[BalanceDrift]) -> int:
        """
        Rewrite due = total - paid where a summary breaks it.

        Ghost balances are left alone: they may be legitimate pre-log balances.

        Returns:
            Number of summaries rewritten
        """
        repaired = 0
        for drift in drifts:
            if abs(drift.invariant_gap) <= TOLERANCE:
                continue
            try:
                await self.party_repo.update_payment(drift.party_type, drift.party_id, {
                    "due_amount": drift.total_amount - drift.paid_amount,
                })
            except RecordStoreError as e:
                logger.error(f"Error repairing balance summary of {drift.party_name}: {str(e)}")
                raise
            repaired += 1
            logger.info(f"Repaired due amount of {drift.party_name}: "
                        f"{drift.due_amount:.2f} -> {drift.total_amount - drift.paid_amount:.2f}")
        return repaired
