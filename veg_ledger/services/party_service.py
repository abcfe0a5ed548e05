"""Service layer for supplier and customer maintenance."""

import logging
from typing import Optional

from veg_ledger.config import WALK_IN_CODE, WALK_IN_NAME
from veg_ledger.errors import RecordStoreError, ValidationError
from veg_ledger.models.schemas import Customer, Party, PartyType
from veg_ledger.repositories.party_repository import PartyRepository, party_class
from veg_ledger.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class PartyService:
    """Validated create, edit, balance correction and delete for parties."""

    def __init__(self, store: LedgerStore, party_repo: PartyRepository):
        """Initialize with the in-memory store and the party repository."""
        self.store = store
        self.party_repo = party_repo

    def _check_code_free(self, party_type: PartyType, code: str, exclude_id: Optional[str] = None) -> None:
        if not code:
            return
        for other in self.store.parties(party_type):
            if other.code == code and other.id != exclude_id:
                raise ValidationError(
                    f"{party_type.value} code '{code}' is already assigned to {other.name}."
                )

    async def add_party(self, party_type: PartyType, name: str, contact: str = "",
                        address: str = "", code: str = "") -> Party:
        """
        Create a supplier or customer with an empty balance summary.

        Args:
            party_type: Supplier or Customer
            name: Unique name (compared case-insensitively)
            contact: Phone number
            address: Postal address
            code: Optional short code, unique within the party type

        Returns:
            The created party
        """
        party_type = PartyType(party_type)
        if not name or not name.strip():
            raise ValidationError(f"{party_type.value} name is required.")
        if self.store.find_party_by_name(party_type, name) is not None:
            raise ValidationError(f"{party_type.value} with this name already exists.")
        self._check_code_free(party_type, code)

        party = party_class(party_type)(
            id=self.party_repo.new_party_id(party_type),
            name=name.strip(),
            contact=contact or "",
            address=address or "",
            code=code or "",
        )
        try:
            await self.party_repo.create(party_type, party)
        except RecordStoreError as e:
            logger.error(f"Error adding {party_type.value.lower()} {name}: {str(e)}")
            raise
        return party

    async def update_party(self, party_type: PartyType, party: Party) -> bool:
        """
        Save edited party details and mirror the name into its balance summary.

        Returns:
            False when the party no longer exists (nothing written)
        """
        party_type = PartyType(party_type)
        if self.store.get_party(party_type, party.id) is None:
            logger.warning(f"{party_type.value} {party.id} not found; update skipped")
            return False
        self._check_code_free(party_type, party.code, exclude_id=party.id)

        payment_patch = None
        if self.store.get_payment_detail(party_type, party.id) is not None:
            payment_patch = {"party_name": party.name, "code": party.code or ""}
        try:
            await self.party_repo.update(party_type, party, payment_patch)
        except RecordStoreError as e:
            logger.error(f"Error updating {party_type.value.lower()} {party.id}: {str(e)}")
            raise
        return True

    async def correct_balance(self, party_type: PartyType, party_id: str, due_amount: float) -> bool:
        """
        Set a party's due amount by back-solving its paid amount.

        paid' = paid + (due - due_new), due' = total - paid'. The walk-in
        customer carries no balance and is left untouched.

        Returns:
            False when nothing was written
        """
        party_type = PartyType(party_type)
        party = self.store.get_party(party_type, party_id)
        detail = self.store.get_payment_detail(party_type, party_id)
        if party is None or detail is None:
            logger.warning(f"No balance summary for {party_type.value.lower()} {party_id}; correction skipped")
            return False
        if party.is_walk_in:
            logger.warning("Walk-in customer balance is always zero; correction skipped")
            return False

        new_paid = detail.paid_amount + (detail.due_amount - due_amount)
        try:
            await self.party_repo.update_payment(party_type, party_id, {
                "paid_amount": new_paid,
                "due_amount": detail.total_amount - new_paid,
            })
        except RecordStoreError as e:
            logger.error(f"Error correcting balance of {party_type.value.lower()} {party_id}: {str(e)}")
            raise
        logger.info(f"Corrected due amount of {party.name} from {detail.due_amount:.2f} to {due_amount:.2f}")
        return True

    async def update_party_with_balance(self, party_type: PartyType, party: Party, due_amount: float) -> bool:
        """Edit-dialog save: party details first, then the balance correction."""
        if not await self.update_party(party_type, party):
            return False
        await self.correct_balance(party_type, party.id, due_amount)
        return True

    async def delete_party(self, party_type: PartyType, party_id: str) -> None:
        """Delete a party and its balance summary."""
        party_type = PartyType(party_type)
        try:
            await self.party_repo.delete(party_type, party_id)
        except RecordStoreError as e:
            logger.error(f"Error deleting {party_type.value.lower()} {party_id}: {str(e)}")
            raise

    async def ensure_walk_in_customer(self) -> Customer:
        """
        Make sure exactly one walk-in customer exists.

        Extra records named like the walk-in customer are deleted on a
        best-effort basis; failures there are only logged.
        """
        walk_ins = self.store.walk_in_customers()
        if walk_ins:
            keep, duplicates = walk_ins[0], walk_ins[1:]
            if duplicates:
                logger.info(f"Found {len(duplicates)} duplicate Walk-in Customers. Deleting...")
            for duplicate in duplicates:
                try:
                    await self.party_repo.delete(PartyType.CUSTOMER, duplicate.id)
                except RecordStoreError as e:
                    logger.error(f"Failed to delete duplicate customer {duplicate.id}: {str(e)}")
            return keep

        customer = await self.add_party(PartyType.CUSTOMER, WALK_IN_NAME, code=WALK_IN_CODE)
        logger.info("Created default Walk-in Customer")
        return customer
