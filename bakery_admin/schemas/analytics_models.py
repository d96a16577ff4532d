"""Response models for dashboard, analytics, report, stock and prediction endpoints."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

class RevenueStats(BaseModel):
    total: float
    formatted: str

class OrderStats(BaseModel):
    total: int
    completed: int
    pending: int

class ProductStats(BaseModel):
    total: int
    in_stock: int
    out_of_stock: int

class CustomerStats(BaseModel):
    total: int

class DashboardStats(BaseModel):
    revenue: RevenueStats
    orders: OrderStats
    products: ProductStats
    customers: CustomerStats
    last_updated: datetime

class KpiSummary(BaseModel):
    total_orders: int
    total_revenue: float
    total_quantity: int
    unique_users: int
    avg_order_value: float

class Series(BaseModel):
    label: str
    data: List[float]

class ChartData(BaseModel):
    labels: List[str]
    datasets: List[Series]

class HeatmapPoint(BaseModel):
    x: int
    y: int
    v: int

class Heatmap(BaseModel):
    x_labels: List[str]
    y_labels: List[str]
    points: List[HeatmapPoint]
    max_value: int

class CategorizedStatusCounts(BaseModel):
    delivered: int = 0
    pending: int = 0
    cancelled: int = 0
    others: int = 0

class AnalyticsResponse(BaseModel):
    summary: Optional[KpiSummary] = None
    status_counts: Dict[str, int] = Field(default_factory=dict)
    categorized_status_counts: CategorizedStatusCounts
    daily: ChartData
    top_products: ChartData
    order_status: ChartData
    payment_methods: ChartData
    customer_frequency: ChartData
    heatmap: Heatmap
    orders_by_hour: Optional[ChartData] = None
    revenue_by_hour: Optional[ChartData] = None
    items: List[str] = Field(default_factory=list)
    single_day: bool = False

class AnalyticsRow(BaseModel):
    order_id: str
    user_id: str
    item_name: str
    quantity: int
    price: float
    total_price: float
    order_status: str
    payment_method: str
    created_at: datetime
    order_date: str
    order_time: str

class DailyReportRow(BaseModel):
    date: str
    total_orders: int
    delivered_orders: int
    most_ordered_item: str
    most_ordered_qty: int
    most_delivered_item: str
    most_delivered_qty: int
    total_items_sold: int
    total_delivered_items: int
    total_order_amt: float
    total_revenue_delivered: float
    highest_order_amt: float

class StockRow(BaseModel):
    product_id: int
    name: str
    category: str
    stock: int
    sold: int
    available: int

class StockOrder(BaseModel):
    id: str
    short_id: str
    customer_name: str
    order_status: str
    created_at: datetime
    items: List[str]

class StockReport(BaseModel):
    start: datetime
    end: datetime
    range: str
    products: List[StockRow]
    orders: List[StockOrder]

class PredictionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    prediction_type: str
    item_name: Optional[str] = None
    date: str
    predicted_value: float
    stored_at: Optional[datetime] = None
