from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict


class SupplierForm(BaseModel):
    name: str = ""
    contact_person: str = Field("", alias="contactPerson")
    phone: str = ""
    email: str = ""
    address: str = ""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
