from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReportWindow(BaseModel):
    """
    Invocation parameters for one run: an inclusive date window and an optional
    category filter. `category_filter=None` matches every category, null included.
    """

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    category_filter: Optional[frozenset[str]] = None

    @model_validator(mode="after")
    def check_window_order(self) -> "ReportWindow":
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )
        return self

    def describe_filter(self) -> str:
        if self.category_filter is None:
            return "all categories"
        return ", ".join(sorted(self.category_filter))


class LostSalesRecord(BaseModel):
    """
    Defines the data contract for a single row of the lost-sales report:
    one reportable (sku, warehouse, supplier) combination.
    """

    model_config = ConfigDict(populate_by_name=True)

    warehouse_id: str
    warehouse_name: Optional[str] = None
    country: Optional[str] = None
    sku_id: str
    sku_name: Optional[str] = None
    use_case_category: Optional[str] = None
    supplier_name: str
    bundle_size: float = Field(..., ge=0)
    internal_quantity: Optional[float] = None
    num_units_delivered: int = Field(default=0, ge=0)
    avg_daily_consumption: float = Field(default=0, ge=0)
    days_out_of_stock: int
    days_in_stock: int = Field(default=0, ge=0)
    missed_opportunities: int
