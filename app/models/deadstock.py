from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict

DEADSTOCK_REASONS = [
    "Damaged",
    "Expired",
    "Obsolete",
    "Lost",
    "Stolen",
    "Defective",
    "Worn Out",
    "Broken",
    "Contaminated",
    "Other",
]


class DeadstockForm(BaseModel):
    user_id: str = Field("", alias="userId")
    item_id: str = Field("", alias="itemId")
    quantity: int = 0
    reason: str = ""
    reported_at: str = Field("", alias="reportedAt")

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "item_id": self.item_id,
            "quantity": self.quantity,
            "reason": self.reason,
            "reported_at": self.reported_at,
        }
