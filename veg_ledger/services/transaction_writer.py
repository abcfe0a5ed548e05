"""Service turning carts and payments into atomic ledger writes."""

import logging
from datetime import date, datetime
from typing import List, Optional

from veg_ledger.config import (
    CREDIT_PAYMENT_METHOD,
    DEFAULT_PAYMENT_METHOD,
    SALE_PAYMENT_ITEM,
    PURCHASE_PAYMENT_ITEM,
    STANDALONE_PAYMENT_ITEM,
)
from veg_ledger.errors import RecordStoreError, ValidationError
from veg_ledger.models.schemas import (
    LineItem, Party, PartyDetails, PartyType, PaymentDetail, Transaction, TransactionType,
)
from veg_ledger.repositories.base import WriteOp
from veg_ledger.repositories.party_repository import PartyRepository, party_class
from veg_ledger.repositories.transaction_repository import TransactionRepository
from veg_ledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

_PARTY_TYPES = {
    TransactionType.SALE: PartyType.CUSTOMER,
    TransactionType.PURCHASE: PartyType.SUPPLIER,
}


class TransactionWriter:
    """
    Writes bills and payments.

    Every call produces one atomic write: log entries, the party's balance
    summary, a new party record when needed, and the synthetic payment entry.
    State visible through the LedgerStore changes only once the store's
    subscription delivers the committed documents.
    """

    def __init__(self, store: LedgerStore, transaction_repo: TransactionRepository, party_repo: PartyRepository):
        """Initialize with the in-memory store and the repositories it writes through."""
        self.store = store
        self.transaction_repo = transaction_repo
        self.party_repo = party_repo

    @staticmethod
    def resolve_amount_paid(total_amount: float, payment_method: str, is_walk_in: bool,
                            amount_paid_override: Optional[float] = None) -> float:
        """Walk-in pays in full; otherwise the override, else everything unless on credit."""
        if is_walk_in:
            return total_amount
        if amount_paid_override is not None:
            return amount_paid_override
        return total_amount if payment_method != CREDIT_PAYMENT_METHOD else 0.0

    async def add_transaction(
        self,
        line_items: List[LineItem],
        party_details: PartyDetails,
        transaction_type: TransactionType = TransactionType.SALE,
        payment_method: str = DEFAULT_PAYMENT_METHOD,
        amount_paid_override: Optional[float] = None,
    ) -> Optional[int]:
        """
        Record a sale or purchase bill.

        Args:
            line_items: Cart rows, all on the bill date
            party_details: Name, contact and address of the counterpart
            transaction_type: Sale (customer) or Purchase (supplier)
            payment_method: Method recorded on the bill and on the payment entry
            amount_paid_override: Amount collected now, when not the whole bill

        Returns:
            The bill number, or None for an empty cart
        """
        if not line_items:
            return None

        transaction_type = TransactionType(transaction_type)
        if transaction_type not in _PARTY_TYPES:
            raise ValidationError(f"Bills are Sale or Purchase, not {transaction_type.value}")
        if amount_paid_override is not None and amount_paid_override < 0:
            raise ValidationError("Amount paid cannot be negative")

        if len({item.date for item in line_items}) > 1:
            raise ValidationError("All items on a bill must share one date")

        party_type = _PARTY_TYPES[transaction_type]
        bill_date = line_items[0].date
        created_at = datetime.utcnow().isoformat()
        total_amount = sum(item.total for item in line_items)

        party = self.store.find_party_by_name(party_type, party_details.name)
        party_ops: List[WriteOp] = []
        if party is None:
            party = party_class(party_type)(
                id=self.party_repo.new_party_id(party_type),
                name=party_details.name,
                contact=party_details.contact,
                address=party_details.address,
            )
            party_ops.append(self.party_repo.build_set_party_op(party_type, party))
            logger.info(f"New {party_type.value.lower()} '{party.name}' will be created with the bill")

        is_walk_in = party_type == PartyType.CUSTOMER and party.is_walk_in
        amount_paid = self.resolve_amount_paid(total_amount, payment_method, is_walk_in, amount_paid_override)
        summary_op = self._build_summary_op(party_type, party, total_amount, amount_paid,
                                            payment_method, is_walk_in)

        def build_ops(bill_number: int) -> List[WriteOp]:
            ops = []
            for item in line_items:
                entry = Transaction(
                    id=self.transaction_repo.new_transaction_id(),
                    date=bill_date,
                    party=party_details.name,
                    type=transaction_type,
                    item=item.item,
                    amount=item.total,
                    payment=payment_method,
                    quantity=item.quantity,
                    price=item.price,
                    bill_number=bill_number,
                    created_at=created_at,
                )
                ops.append(self.transaction_repo.build_create_op(entry))
            ops.extend(party_ops)
            ops.append(summary_op)
            if amount_paid > 0:
                ops.append(self.transaction_repo.build_create_op(
                    self._payment_entry(party_type, party_details.name, bill_date, amount_paid,
                                        payment_method, created_at,
                                        SALE_PAYMENT_ITEM if party_type == PartyType.CUSTOMER
                                        else PURCHASE_PAYMENT_ITEM)
                ))
            return ops

        try:
            bill_number = await self.transaction_repo.append_with_bill_number(
                bill_date, self.store.max_bill_number(bill_date), build_ops
            )
        except RecordStoreError as e:
            logger.error(f"Error writing {transaction_type.value.lower()} bill for {party_details.name}: {str(e)}")
            raise

        logger.info(f"Recorded {transaction_type.value.lower()} bill #{bill_number} on {bill_date.isoformat()} "
                    f"for {party_details.name}: total {total_amount:.2f}, paid {amount_paid:.2f}")
        return bill_number

    def _build_summary_op(self, party_type: PartyType, party: Party, total_amount: float,
                          amount_paid: float, payment_method: str, is_walk_in: bool) -> WriteOp:
        """Add the bill to the party's running totals, creating the summary if absent."""
        method = DEFAULT_PAYMENT_METHOD if is_walk_in else payment_method
        existing = self.store.get_payment_detail(party_type, party.id)

        if existing is not None:
            new_total = existing.total_amount + total_amount
            new_paid = existing.paid_amount + amount_paid
            return self.party_repo.build_update_payment_op(party_type, party.id, {
                "total_amount": new_total,
                "paid_amount": new_paid,
                "due_amount": 0.0 if is_walk_in else new_total - new_paid,
                "payment_method": method,
            })

        return self.party_repo.build_set_payment_op(party_type, PaymentDetail(
            id=party.id,
            party_id=party.id,
            party_name=party.name,
            total_amount=total_amount,
            paid_amount=amount_paid,
            due_amount=0.0 if is_walk_in else total_amount - amount_paid,
            payment_method=method,
        ))

    def _payment_entry(self, party_type: PartyType, party_name: str, day: date, amount: float,
                       payment_method: str, created_at: str, item: str) -> Transaction:
        """Customer payments are debits, supplier payments credits."""
        is_supplier = party_type == PartyType.SUPPLIER
        return Transaction(
            id=self.transaction_repo.new_transaction_id(),
            date=day,
            party=party_name,
            type=TransactionType.PAYMENT,
            item=item,
            amount=amount,
            payment=payment_method,
            credit=amount if is_supplier else 0.0,
            debit=0.0 if is_supplier else amount,
            created_at=created_at,
        )

    async def add_payment(
        self,
        party_id: str,
        party_name: str,
        party_type: PartyType,
        amount: float,
        payment_method: str = DEFAULT_PAYMENT_METHOD,
        on_date: Optional[date] = None,
    ) -> str:
        """
        Record money received from a customer or paid to a supplier.

        Args:
            party_id: Party whose balance summary is reduced
            party_name: Name written on the log entry
            party_type: Supplier or Customer
            amount: Positive amount paid
            payment_method: Cash, GPay, NEFT, ...
            on_date: Calendar day of the payment (defaults to today)

        Returns:
            ID of the payment log entry
        """
        party_type = PartyType(party_type)
        if amount is None or amount <= 0:
            raise ValidationError("Payment amount must be greater than zero")

        entry = self._payment_entry(party_type, party_name, on_date or date.today(), amount,
                                    payment_method, datetime.utcnow().isoformat(), STANDALONE_PAYMENT_ITEM)
        ops = [self.transaction_repo.build_create_op(entry)]

        existing = self.store.get_payment_detail(party_type, party_id)
        if existing is not None:
            party = self.store.get_party(party_type, party_id)
            new_paid = existing.paid_amount + amount
            is_walk_in = party is not None and party.is_walk_in
            ops.append(self.party_repo.build_update_payment_op(party_type, party_id, {
                "paid_amount": new_paid,
                "due_amount": 0.0 if is_walk_in else existing.total_amount - new_paid,
                "payment_method": payment_method,
            }))
        else:
            logger.warning(f"No balance summary for {party_type.value.lower()} {party_id}; logging payment only")

        try:
            await self.transaction_repo.commit(ops)
        except RecordStoreError as e:
            logger.error(f"Error recording payment of {amount:.2f} for {party_name}: {str(e)}")
            raise

        logger.info(f"Recorded payment of {amount:.2f} ({payment_method}) for {party_type.value.lower()} {party_name}")
        return entry.id
