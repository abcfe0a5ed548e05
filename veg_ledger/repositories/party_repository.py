"""Repository for suppliers, customers and their balance summaries."""

import logging
from typing import Any, Dict, List, Optional, Union

from veg_ledger.config import (
    SUPPLIERS_COLLECTION,
    CUSTOMERS_COLLECTION,
    SUPPLIER_PAYMENTS_COLLECTION,
    CUSTOMER_PAYMENTS_COLLECTION,
    CREDIT_PAYMENT_METHOD,
)
from veg_ledger.models.schemas import Customer, Party, PartyType, PaymentDetail, Supplier
from veg_ledger.repositories.base import RecordStore, WriteOp

logger = logging.getLogger(__name__)

_PARTY_COLLECTIONS = {
    PartyType.SUPPLIER: SUPPLIERS_COLLECTION,
    PartyType.CUSTOMER: CUSTOMERS_COLLECTION,
}

_PAYMENT_COLLECTIONS = {
    PartyType.SUPPLIER: SUPPLIER_PAYMENTS_COLLECTION,
    PartyType.CUSTOMER: CUSTOMER_PAYMENTS_COLLECTION,
}

_PARTY_CLASSES = {
    PartyType.SUPPLIER: Supplier,
    PartyType.CUSTOMER: Customer,
}


def party_collection(party_type: Union[PartyType, str]) -> str:
    return _PARTY_COLLECTIONS[PartyType(party_type)]


def payment_collection(party_type: Union[PartyType, str]) -> str:
    return _PAYMENT_COLLECTIONS[PartyType(party_type)]


def party_class(party_type: Union[PartyType, str]):
    return _PARTY_CLASSES[PartyType(party_type)]


class PartyRepository:
    """
    Repository for party records.

    A party's balance summary shares its document id, so creating or deleting
    a party always produces writes against both collections.
    """

    def __init__(self, dao: RecordStore):
        """Initialize with a record store."""
        self.dao = dao

    def new_party_id(self, party_type: PartyType) -> str:
        return self.dao.new_document_id(party_collection(party_type))

    # Write-op builders
    def build_set_party_op(self, party_type: PartyType, party: Party) -> WriteOp:
        return WriteOp.set(party_collection(party_type), party.id, party)

    def build_update_party_op(self, party_type: PartyType, party: Party) -> WriteOp:
        return WriteOp.update(party_collection(party_type), party.id, {
            "name": party.name,
            "contact": party.contact,
            "address": party.address,
            "code": party.code or "",
        })

    def build_set_payment_op(self, party_type: PartyType, detail: PaymentDetail) -> WriteOp:
        data = {
            "id": detail.party_id,
            "party_id": detail.party_id,
            "party_name": detail.party_name,
            "total_amount": detail.total_amount,
            "paid_amount": detail.paid_amount,
            "due_amount": detail.due_amount,
            "payment_method": detail.payment_method,
        }
        return WriteOp.set(payment_collection(party_type), detail.party_id, data)

    def build_update_payment_op(self, party_type: PartyType, party_id: str, patch: Dict[str, Any]) -> WriteOp:
        return WriteOp.update(payment_collection(party_type), party_id, patch)

    def build_create_ops(self, party_type: PartyType, party: Party) -> List[WriteOp]:
        """Party record plus a zeroed balance summary."""
        empty_detail = PaymentDetail(
            id=party.id,
            party_id=party.id,
            party_name=party.name,
            total_amount=0.0,
            paid_amount=0.0,
            due_amount=0.0,
            payment_method=CREDIT_PAYMENT_METHOD,
        )
        return [
            self.build_set_party_op(party_type, party),
            self.build_set_payment_op(party_type, empty_detail),
        ]

    def build_delete_ops(self, party_type: PartyType, party_id: str) -> List[WriteOp]:
        return [
            WriteOp.delete(party_collection(party_type), party_id),
            WriteOp.delete(payment_collection(party_type), party_id),
        ]

    # Committed writes
    async def create(self, party_type: PartyType, party: Party) -> str:
        """Create a party and its balance summary atomically."""
        await self.dao.commit_batch(self.build_create_ops(party_type, party))
        logger.info(f"Created {party_type.value.lower()} {party.id} ({party.name})")
        return party.id

    async def update(self, party_type: PartyType, party: Party,
                     payment_patch: Optional[Dict[str, Any]] = None) -> None:
        """Update a party and, when given, patch its balance summary in the same batch."""
        ops = [self.build_update_party_op(party_type, party)]
        if payment_patch:
            ops.append(self.build_update_payment_op(party_type, party.id, payment_patch))
        await self.dao.commit_batch(ops)
        logger.info(f"Updated {party_type.value.lower()} {party.id} ({party.name})")

    async def update_payment(self, party_type: PartyType, party_id: str, patch: Dict[str, Any]) -> None:
        await self.dao.commit_batch([self.build_update_payment_op(party_type, party_id, patch)])
        logger.info(f"Updated balance summary of {party_type.value.lower()} {party_id}")

    async def delete(self, party_type: PartyType, party_id: str) -> None:
        """Delete a party together with its balance summary."""
        await self.dao.commit_batch(self.build_delete_ops(party_type, party_id))
        logger.info(f"Deleted {party_type.value.lower()} {party_id}")
