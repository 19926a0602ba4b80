import io
from decimal import Decimal

import pandas as pd
import streamlit as st

# Configuration
from stockroom.config import get_config

# BackendClient factory + services
from stockroom.data.util import get_backend
from stockroom.data.models import OrderDraft, OrderItem, ProductFilters
from stockroom.services.access_service import fetch_company_access
from stockroom.services.inventory_service import (
    category_types,
    delete_product,
    filter_products,
    list_products,
    stock_status,
)
from stockroom.services.order_service import create_order, list_customers, list_orders, order_total
from stockroom.services.spreadsheet import export_products, import_products

st.set_page_config(page_title="Stockroom: Inventory & Orders", layout="wide")

# -----------------------------------------------------------------------------
# Backend selection (CSV for local dev, Supabase when configured)
# -----------------------------------------------------------------------------
config = get_config()
if "backend" not in st.session_state:
    st.session_state.backend = get_backend()
    st.session_state.order_items = []
backend = st.session_state.backend


def _persist():
    # The CSV backend only writes back on flush
    if hasattr(backend, "flush"):
        backend.flush()


# -----------------------------------------------------------------------------
# Sidebar
# -----------------------------------------------------------------------------
st.sidebar.header("Stockroom")
page = st.sidebar.radio("Page", ["Inventory", "New order"])

staff_email = st.sidebar.text_input("Staff email")
if staff_email:
    access = fetch_company_access(backend, staff_email)
    if access is None:
        st.sidebar.caption("No staff record found")
    elif not access:
        st.sidebar.caption("No company access found")
    else:
        st.sidebar.selectbox("Company", [a.business_name for a in access])

products = list_products(backend)

# -----------------------------------------------------------------------------
# Inventory
# -----------------------------------------------------------------------------
if page == "Inventory":
    st.markdown("### Inventory")

    c1, c2, c3 = st.columns(3)
    search = c1.text_input("Search name, SKU or description")
    stock_filter = c2.selectbox("Stock", ["all", "in-stock", "low-stock", "out-of-stock"])
    category_type = c3.selectbox("Category type", category_types(products))

    shown = filter_products(
        products, ProductFilters(search=search, stock_filter=stock_filter, category_type=category_type)
    )
    grid = pd.DataFrame(
        [
            {
                "name": p.name,
                "sku": p.sku,
                "category_type": p.category_type,
                "price": float(p.price),
                "stock": p.stock,
                "threshold": p.threshold,
                "status": stock_status(p).value,
                "id": p.id,
            }
            for p in shown
        ]
    )
    st.dataframe(grid, use_container_width=True)

    with st.expander("Delete product"):
        options = {f"{p.name} ({p.sku})": p for p in shown}
        choice = st.selectbox("Product", list(options) or ["(none)"])
        if options and st.button("Delete", type="primary"):
            delete_product(backend, options[choice].id)
            _persist()
            st.success(f"{options[choice].name} has been removed from inventory.")
            st.rerun()

    with st.expander("Import / export"):
        buffer = io.BytesIO()
        export_products(products, buffer)
        st.download_button("Export to Excel", buffer.getvalue(), file_name=config.export_filename)

        upload = st.file_uploader("Import from Excel", type=["xlsx"])
        if upload is not None and st.button("Import"):
            summary = import_products(backend, upload)
            _persist()
            if summary.successes > 0:
                st.success(summary.message)
            else:
                st.error(summary.message)

# -----------------------------------------------------------------------------
# New order
# -----------------------------------------------------------------------------
else:
    st.markdown("### New order")

    customers = list_customers(backend)
    labels = {c.name or c.id: c.id for c in customers}
    customer_label = st.selectbox("Customer", ["(select)"] + list(labels))

    by_label = {f"{p.name} ({p.sku})": p for p in products}
    c1, c2, c3 = st.columns([3, 1, 1])
    product_label = c1.selectbox("Product", list(by_label) or ["(none)"])
    quantity = c2.number_input("Quantity", min_value=1, value=1, step=1)
    if by_label and c3.button("Add item"):
        p = by_label[product_label]
        st.session_state.order_items.append(OrderItem.for_product(p.id, p.name, int(quantity), p.price))

    items = st.session_state.order_items
    if items:
        st.dataframe(pd.DataFrame([i.model_dump(mode="json") for i in items]), use_container_width=True)
    st.metric("Total", f"${order_total(items):,.2f}")

    c1, c2 = st.columns(2)
    status = c1.selectbox("Status", ["pending", "processing", "completed"])
    payment_status = c2.selectbox("Payment status", ["unpaid", "paid"])

    if st.button("Create order", type="primary"):
        draft = OrderDraft(
            customer_id=labels.get(customer_label),
            status=status,
            payment_status=payment_status,
            items=list(items),
        )
        result = create_order(backend, draft)
        _persist()
        if result.success:
            st.success(f"Order {result.order_id} created, total ${result.total or Decimal('0'):,.2f}")
            for warning in result.stock_warnings:
                st.warning(f"Stock for product {warning.product_id} was not updated: {warning.message}")
            if result.stats_warning:
                st.warning("Customer statistics were not updated")
            st.session_state.order_items = []
        else:
            st.error(result.error)

    customer_id = labels.get(customer_label)
    if customer_id:
        st.markdown("#### Previous orders")
        orders = list_orders(backend, customer_id=customer_id)
        if orders:
            st.dataframe(pd.DataFrame([o.model_dump(mode="json") for o in orders]), use_container_width=True)
        else:
            st.caption("No orders yet")
