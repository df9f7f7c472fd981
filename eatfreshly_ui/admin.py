"""Streamlit back office for EatFreshly."""

import streamlit as st

from eatfreshly.client.formatting import format_currency, format_timestamp
from eatfreshly.models.menu import MENU_CATEGORIES
from eatfreshly.services.order_status import ORDER_STATUSES
from eatfreshly_ui.common import call, get_admin_client, notify, now_string

st.set_page_config(page_title="EatFreshly Admin", layout="wide")
st.title("EatFreshly Admin")
st.caption(f"Last refresh: {now_string()}")

client = get_admin_client()

if not client.credentials.is_authenticated:
    with st.form("admin_login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Login") and call(client.login, email, password):
            st.rerun()
    st.stop()

if st.sidebar.button("Logout"):
    call(client.logout)
    st.rerun()

dashboard_tab, orders_tab, menu_tab, promotions_tab, reports_tab = st.tabs(
    ["Dashboard", "Orders", "Menu", "Promotions", "Reports"]
)

with dashboard_tab:
    metrics = call(client.dashboard_metrics)
    if metrics:
        cols = st.columns(4)
        cols[0].metric("Today's orders", metrics["today_orders"])
        cols[1].metric("Today's revenue", format_currency(metrics["today_revenue"]))
        cols[2].metric("Month revenue", format_currency(metrics["month_revenue"]))
        cols[3].metric("Pending orders", metrics["pending_orders"])
    charts = call(client.dashboard_charts, 7)
    if charts:
        st.line_chart({row["date"]: row["revenue"] for row in charts["revenue_trend"]})
    predictions = call(client.dashboard_predictions)
    if predictions:
        st.subheader("Predicted demand")
        st.dataframe(predictions["top_items"], use_container_width=True)
        forecast = predictions["sales_forecast"]
        st.write(
            f"Next week: {format_currency(forecast['next_week'])} · "
            f"next month: {format_currency(forecast['next_month'])} ({forecast['confidence']}% confidence)"
        )
    for activity in call(client.recent_activities) or []:
        st.caption(f"{format_timestamp(activity['timestamp'])} · {activity['message']}")

with orders_tab:
    status_filter = st.selectbox("Status", ["all"] + ORDER_STATUSES)
    page = call(client.admin_orders, status=None if status_filter == "all" else status_filter, limit=50)
    for order in (page or {}).get("items", []):
        with st.expander(f"{order['order_number']} · {order['customer_name']} · {order['status']} · {format_currency(order['total_price'])}"):
            st.write([f"{item['name']} × {item['quantity']}" for item in order["items"]])
            new_status = st.selectbox(
                "Move to", ORDER_STATUSES, index=ORDER_STATUSES.index(order["status"]), key=f"status_{order['id']}"
            )
            if st.button("Update status", key=f"update_{order['id']}") and call(
                client.update_order_status, order["id"], new_status
            ):
                notify("success", f"{order['order_number']} is now {new_status}")
                st.rerun()

with menu_tab:
    with st.form("new_menu_item"):
        name = st.text_input("Dish name")
        description = st.text_area("Description")
        category = st.selectbox("Category", MENU_CATEGORIES)
        price = st.number_input("Price", min_value=0.0, value=199.0, step=10.0)
        is_vegetarian = st.checkbox("Vegetarian")
        if st.form_submit_button("Save dish") and name and description:
            item = {"name": name, "description": description, "category": category, "price": price, "is_vegetarian": is_vegetarian}
            if call(client.create_menu_item, item):
                notify("success", "Menu item created")
    for item in call(client.admin_menu) or []:
        left, right = st.columns([5, 1])
        state = "available" if item["is_available"] else "hidden"
        left.write(f"{item['name']} · {item['category']} · {format_currency(item['price'])} · {state}")
        if right.button("Toggle", key=f"toggle_{item['id']}") and call(client.toggle_menu_item, item["id"]):
            st.rerun()

with promotions_tab:
    page = call(client.admin_promotions, limit=50)
    for promotion in (page or {}).get("items", []):
        left, right = st.columns([5, 1])
        left.write(
            f"{promotion['title']} · {promotion['promo_code'] or '-'} · "
            f"{promotion['discount_value']} {promotion['discount_type']} · used {promotion['used_count']}"
        )
        if right.button("Toggle", key=f"promo_{promotion['id']}") and call(client.toggle_promotion, promotion["id"]):
            st.rerun()

with reports_tab:
    start_date = st.date_input("From", value=None)
    end_date = st.date_input("To", value=None)
    filters = {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
    }
    report = call(client.sales_report, **filters)
    if report:
        st.json(report["summary"])
        st.dataframe(report["sales_data"], use_container_width=True)
    export_type = st.selectbox("Export", ["orders", "users", "menu"])
    csv_bytes = call(client.export_csv, export_type, **filters)
    if csv_bytes is not None:
        st.download_button("Download CSV", data=csv_bytes, file_name=f"{export_type}.csv", mime="text/csv")
    pdf_bytes = call(client.orders_pdf, **filters)
    if pdf_bytes is not None:
        st.download_button("Download orders PDF", data=pdf_bytes, file_name="orders.pdf", mime="application/pdf")
