"""Products API router."""
from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlalchemy.orm import Session
from typing import List
from opentelemetry import trace

from auth import verify_token
from database import get_db
from dependencies import get_product_service
from monitoring import product_views_counter
from schemas import ProductCreate, ProductResponse, ProductUpdate
from services.catalog_service import DuplicateProduct, ProductNotFound, ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


# Specific routes are registered before the parameterized ones
@router.get("/category/{category_id}", response_model=List[ProductResponse])
def get_products_by_category(
    category_id: str = Path(..., description="Category identifier"),
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service)
):
    """List products in one category."""
    products = product_service.list_products(db, category_id=category_id)

    span = trace.get_current_span()
    span.set_attribute("product.count", len(products))
    span.set_attribute("product.category_id", category_id)

    product_views_counter.add(1, {"view": "category"})
    return products


@router.get("", response_model=List[ProductResponse])
def get_products(
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service)
):
    """List the whole catalog."""
    products = product_service.list_products(db)

    span = trace.get_current_span()
    span.set_attribute("product.count", len(products))

    product_views_counter.add(1, {"view": "catalog"})
    return products


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str = Path(..., description="Product ID"),
    db: Session = Depends(get_db),
    product_service: ProductService = Depends(get_product_service)
):
    """Get product details."""
    product = product_service.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product_views_counter.add(1, {"view": "detail"})
    return product


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(
    request: ProductCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_token),
    product_service: ProductService = Depends(get_product_service)
):
    """Add a product - requires authentication."""
    try:
        return product_service.create_product(db, request)
    except DuplicateProduct as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    request: ProductUpdate,
    product_id: str = Path(..., description="Product ID"),
    db: Session = Depends(get_db),
    token: str = Depends(verify_token),
    product_service: ProductService = Depends(get_product_service)
):
    """Update a product - requires authentication."""
    try:
        return product_service.update_product(db, product_id, request)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str = Path(..., description="Product ID"),
    db: Session = Depends(get_db),
    token: str = Depends(verify_token),
    product_service: ProductService = Depends(get_product_service)
):
    """Delete a product - requires authentication."""
    try:
        product_service.delete_product(db, product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=204)
