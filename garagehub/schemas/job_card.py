"""
Pydantic schemas for Job Card.

Job cards travel as camelCase documents (``customer.name``, ``laborHours``,
...); snake_case keys are accepted on input as well.
"""
from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import Field, field_validator, model_validator

from garagehub.models.job_card import JobStatus
from garagehub.sanitize import Hours, Money, Quantity
from garagehub.schemas.common import CamelModel


class CustomerInfo(CamelModel):
    name: str = ""
    phone: str = ""


class CarInfo(CamelModel):
    make: str = ""
    model: str = ""
    plate: str = ""


class JobCardPart(CamelModel):
    """A part used on a job, either from inventory or a custom (bought-in) part."""
    id: Optional[str] = None
    inventory_id: str = ""
    name: str
    quantity: Quantity = 1
    unit_price: Money = 0
    total: Optional[float] = None
    in_stock: bool = False
    added_to_purchase_list: bool = False
    order_status: Optional[str] = None
    is_custom: bool = False

    @model_validator(mode="after")
    def fill_total(self):
        self.total = round(self.quantity * self.unit_price, 2)
        return self


class SelectedService(CamelModel):
    """Catalogue service attached to a job card, with the price at the time."""
    id: str
    service_name: str
    price: Money = 0
    description: Optional[str] = None


class JobCardBase(CamelModel):
    """Fields shared by create and update."""
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    car: CarInfo = Field(default_factory=CarInfo)
    description: str = ""
    assigned_staff: Union[list[str], str] = ""
    status: JobStatus = JobStatus.PENDING
    parts: list[JobCardPart] = Field(default_factory=list)
    labor_hours: Hours = 0
    hourly_rate: Money = 0
    manual_labor_cost: Money = 0
    estimated_completion_date: Optional[date] = None
    actual_completion_date: Optional[datetime] = None
    notes: str = ""
    job_date: Optional[date] = None
    gst_slab_id: Optional[str] = None
    selected_services: list[SelectedService] = Field(default_factory=list)

    @field_validator("gst_slab_id")
    @classmethod
    def blank_slab_is_none(cls, value):
        return value or None


class JobCardCreate(JobCardBase):
    """Schema for creating a job card. Required fields are checked by the service."""
    pass


class JobCardUpdate(JobCardBase):
    """
    Schema for saving a job card. The whole document is re-validated, like
    the create form; send every field.
    """
    pass


class JobCardMove(CamelModel):
    """Schema for moving a job card to another pipeline column."""
    status: JobStatus


class JobPhotoCreate(CamelModel):
    type: str = Field(default="before", pattern="^(before|after)$")
    url: str = Field(min_length=1)


class JobPhoto(CamelModel):
    id: Optional[str] = None
    type: str
    url: str


class JobCard(CamelModel):
    """Schema for job card responses (see ``converters.to_app_job_card``)."""
    id: str
    job_number: str
    customer: CustomerInfo
    car: CarInfo
    description: str
    assigned_staff: str
    status: JobStatus
    date: str
    parts: list[dict[str, Any]]
    labor_hours: float
    hourly_rate: float
    manual_labor_cost: float
    estimated_completion_date: Optional[str] = None
    actual_completion_date: Optional[str] = None
    notes: str
    job_date: str
    photos: list[JobPhoto]
    gst_slab_id: str
    selected_services: list[dict[str, Any]]


class JobCardList(CamelModel):
    job_cards: list[JobCard]
    count: int


class Pipeline(CamelModel):
    """Open jobs per status column plus a page of completed jobs."""
    columns: dict[str, list[JobCard]]
    completed: list[JobCard]
    completed_count: int
    page: int
    page_size: int
