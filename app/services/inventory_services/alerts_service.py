from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.inventory_models import Product
from app.schemas.inventory_schemas import StockAlert


async def get_stock_alerts(db: AsyncSession, category: Optional[str] = None) -> List[StockAlert]:
    """
    Active products whose stock has dropped to their low-stock threshold,
    emptiest shelf first.
    """
    query = select(Product).where(
        Product.is_active == True,  # noqa: E712
        Product.stock <= Product.low_stock_threshold,
    )
    if category:
        query = query.where(Product.category == category)

    result = await db.execute(query.order_by(Product.stock, Product.name))
    return [
        StockAlert(
            product_id=p.id,
            product_name=p.name,
            category=p.category,
            stock=p.stock,
            low_stock_threshold=p.low_stock_threshold,
            out_of_stock=p.stock == 0,
        )
        for p in result.scalars().all()
    ]
