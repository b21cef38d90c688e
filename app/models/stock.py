"""
Stock Movement Models for the University Inventory Portal
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Mapping

from app.core.normalize import reference_id
from app.models.user import affiliation_fields

ISSUE_TYPE_MANUAL = "manual"


class StockInLine(BaseModel):
    item_id: str = Field("", alias="itemId")
    quantity: int = 0
    unit_price: float = Field(0, alias="unitPrice")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price


class StockInForm(BaseModel):
    supplier_id: str = Field("", alias="supplierId")
    invoice_number: str = Field("", alias="invoiceNumber")
    invoice_date: str = Field("", alias="invoiceDate")
    user_id: str = Field("", alias="userId")
    remarks: str = ""
    items: List[StockInLine] = Field(default_factory=lambda: [StockInLine()])

    model_config = ConfigDict(populate_by_name=True)

    def to_payloads(self, receiver: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """One backend record per line, tagged with the receiver's affiliation."""
        affiliation = affiliation_fields(receiver)
        return [
            {
                "user_id": self.user_id,
                "item_id": line.item_id,
                "supplier_id": self.supplier_id,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "total_price": line.total_price,
                "purchase_date": self.invoice_date,
                "invoice_no": self.invoice_number,
                "remarks": self.remarks,
                **affiliation,
            }
            for line in self.items
        ]


class StockOutLine(BaseModel):
    stock_in_id: str = Field("", alias="stockInId")
    quantity: int = 0
    used_location: str = Field("", alias="usedLocation")

    model_config = ConfigDict(populate_by_name=True)


class StockOutForm(BaseModel):
    user_id: str = Field("", alias="userId")
    issue_date: str = Field("", alias="issueDate")
    issue_by: str = Field("", alias="issueBy")
    remarks: str = ""
    items: List[StockOutLine] = Field(default_factory=lambda: [StockOutLine()])

    model_config = ConfigDict(populate_by_name=True)

    def to_payloads(
        self,
        recipient: Mapping[str, Any],
        available: Mapping[str, Mapping[str, Any]],
    ) -> List[Dict[str, Any]]:
        """One backend record per line; ``available`` maps stock-in ids to records."""
        affiliation = affiliation_fields(recipient)
        payloads = []
        for line in self.items:
            stock = available.get(line.stock_in_id) or {}
            payloads.append({
                "user_id": self.user_id,
                "item_id": reference_id(stock.get("item_id")),
                "issue_type": ISSUE_TYPE_MANUAL,
                "issue_by": self.issue_by,
                "issue_date": self.issue_date,
                "quantity": line.quantity,
                "remarks": self.remarks,
                **affiliation,
            })
        return payloads
