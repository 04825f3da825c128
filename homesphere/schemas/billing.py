from typing import List, Optional
from homesphere.schemas.common import CamelModel, PageMeta


class PaymentResponse(CamelModel):
    id: str
    agent_id: str
    subscription_id: Optional[str] = None
    amount: float
    currency: str
    status: str
    method: str
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None


class PaymentListResponse(PageMeta):
    payments: List[PaymentResponse]


class SubscriptionResponse(CamelModel):
    id: str
    agent_id: str
    plan: str
    status: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    auto_renew: bool
    price: float
    currency: str
    features: List[str] = []
    created_at: Optional[str] = None


class SubscriptionListResponse(PageMeta):
    subscriptions: List[SubscriptionResponse]
