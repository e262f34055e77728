"""Product catalog service."""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from opentelemetry import trace

from models import Product
from schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductNotFound(LookupError):
    """Raised when a product id does not exist."""


class DuplicateProduct(ValueError):
    """Raised when creating a product with an id that is already taken."""


def product_to_dict(product: Product) -> Dict[str, Any]:
    """Render a product row in the public catalog shape."""
    return {
        "id": product.id,
        "name": {"en": product.name_en, "vi": product.name_vi},
        "description": {
            "en": product.description_en or "",
            "vi": product.description_vi or "",
        },
        "price": product.price,
        "categoryId": product.category_id,
        "imageUrl": product.image_url,
        "inStock": bool(product.in_stock) if product.in_stock is not None else True,
        "createdAt": product.created_at,
        "updatedAt": product.updated_at,
    }


class ProductService:
    """Service for reading and maintaining the product catalog."""

    def __init__(self):
        self.tracer = trace.get_tracer(__name__)

    def list_products(self, db: Session, category_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List catalog products, optionally restricted to one category.

        Args:
            db: Database session
            category_id: Category identifier to filter on

        Returns:
            Products ordered by creation time
        """
        with self.tracer.start_as_current_span("db.query.list_products") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.table", "products")

            query = db.query(Product)
            if category_id is not None:
                db_span.set_attribute("product.category_id", category_id)
                query = query.filter(Product.category_id == category_id)
            products = query.order_by(Product.created_at, Product.id).all()

            db_span.set_attribute("db.rows_returned", len(products))

        return [product_to_dict(p) for p in products]

    def get_product(self, db: Session, product_id: str) -> Optional[Dict[str, Any]]:
        """
        Look up a single product.

        Args:
            db: Database session
            product_id: Product identifier

        Returns:
            The product, or None if it does not exist
        """
        with self.tracer.start_as_current_span("db.query.get_product") as db_span:
            db_span.set_attribute("db.operation", "SELECT")
            db_span.set_attribute("db.table", "products")
            db_span.set_attribute("product.id", product_id)

            product = db.get(Product, product_id)

            db_span.set_attribute("db.rows_returned", 1 if product else 0)

        return product_to_dict(product) if product else None

    def create_product(self, db: Session, data: ProductCreate) -> Dict[str, Any]:
        """
        Add a product to the catalog.

        Raises:
            DuplicateProduct: If ``data.id`` is already in use
        """
        product_id = data.id or uuid.uuid4().hex
        if db.get(Product, product_id) is not None:
            raise DuplicateProduct(f"Product already exists: {product_id}")

        product = Product(
            id=product_id,
            name_en=data.name.en,
            name_vi=data.name.vi,
            description_en=data.description.en,
            description_vi=data.description.vi,
            price=data.price,
            category_id=data.category_id,
            image_url=data.image_url,
            in_stock=data.in_stock,
        )
        db.add(product)
        db.commit()
        db.refresh(product)

        logger.info("Created product", extra={
            "product_id": product.id,
            "price": product.price
        })
        return product_to_dict(product)

    def update_product(self, db: Session, product_id: str, data: ProductUpdate) -> Dict[str, Any]:
        """
        Apply a partial update to a product.

        Raises:
            ProductNotFound: If the product does not exist
        """
        product = db.get(Product, product_id)
        if product is None:
            raise ProductNotFound(product_id)

        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and data.name is not None:
            product.name_en = data.name.en
            product.name_vi = data.name.vi
        if "description" in changes and data.description is not None:
            product.description_en = data.description.en
            product.description_vi = data.description.vi
        for field in ("category_id", "image_url"):
            if field in changes:
                setattr(product, field, changes[field])
        # Required columns: an explicit null leaves the stored value alone
        for field in ("price", "in_stock"):
            if changes.get(field) is not None:
                setattr(product, field, changes[field])

        db.commit()
        db.refresh(product)

        logger.info("Updated product", extra={
            "product_id": product_id,
            "fields": sorted(changes)
        })
        return product_to_dict(product)

    def delete_product(self, db: Session, product_id: str) -> None:
        """
        Remove a product. Existing orders keep their snapshot of it.

        Raises:
            ProductNotFound: If the product does not exist
        """
        product = db.get(Product, product_id)
        if product is None:
            raise ProductNotFound(product_id)

        db.delete(product)
        db.commit()

        logger.info("Deleted product", extra={"product_id": product_id})
