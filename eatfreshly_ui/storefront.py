"""Streamlit customer storefront: menu, cart, checkout and order tracking."""

import streamlit as st

from eatfreshly.client.checkout import HOSTED_PAYMENT_METHOD, PAYMENT_METHODS, CheckoutFlow, CheckoutForm
from eatfreshly.client.formatting import format_currency, format_timestamp
from eatfreshly.client.order_status import (
    TRACKING_STEPS,
    can_cancel,
    map_order_status,
    status_color,
    tracking_progress,
    tracking_step,
)
from eatfreshly_ui.common import call, get_client, notify

st.set_page_config(page_title="EatFreshly", layout="wide")
st.title("EatFreshly")

client = get_client()


def login_panel() -> None:
    login_tab, register_tab = st.tabs(["Login", "Register"])
    with login_tab, st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Login") and call(client.login, email, password):
            st.rerun()
    with register_tab, st.form("register"):
        name = st.text_input("Name")
        email = st.text_input("Email", key="register_email")
        password = st.text_input("Password", type="password", key="register_password")
        phone = st.text_input("Phone (optional)")
        if st.form_submit_button("Create account") and call(client.register, name, email, password, phone or None):
            st.rerun()


def menu_page() -> None:
    categories = call(client.menu_categories) or []
    col_category, col_search, col_veg = st.columns([2, 3, 1])
    category = col_category.selectbox("Category", ["All"] + [row["name"] for row in categories if row["count"]])
    search = col_search.text_input("Search")
    vegetarian = col_veg.checkbox("Veg only")
    items = call(
        client.list_menu,
        category=None if category == "All" else category,
        search=search or None,
        vegetarian=vegetarian or None,
    ) or []
    for item in items:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            left.markdown(f"**{item['name']}** · {item['category']}")
            left.caption(item["description"])
            price = item["discounted_price"] or item["price"]
            right.write(format_currency(price))
            quantity = right.number_input("Qty", min_value=1, max_value=20, value=1, key=f"qty_{item['id']}")
            if right.button("Add", key=f"add_{item['id']}") and call(client.add_to_cart, item["id"], int(quantity)):
                notify("success", f"{item['name']} added to cart")


def cart_page() -> None:
    cart = call(client.get_cart)
    if cart is None:
        return
    if not cart["items"]:
        st.info("Your cart is empty.")
    for line in cart["items"]:
        left, middle, right = st.columns([4, 2, 1])
        left.write(f"{line['name']} × {line['quantity']}")
        quantity = middle.number_input("Qty", 1, 20, line["quantity"], key=f"cart_{line['id']}")
        if quantity != line["quantity"]:
            call(client.update_cart_item, line["id"], int(quantity))
            st.rerun()
        if right.button("Remove", key=f"remove_{line['id']}"):
            call(client.remove_cart_item, line["id"])
            st.rerun()
    st.subheader(f"Total: {format_currency(cart['total_amount'])}")

    st.divider()
    st.subheader("Checkout")
    with st.form("checkout"):
        street = st.text_input("Street")
        city = st.text_input("City")
        state = st.text_input("State")
        zip_code = st.text_input("PIN code")
        payment_method = st.selectbox("Payment method", PAYMENT_METHODS)
        promo_code = st.text_input("Promo code (optional)")
        instructions = st.text_area("Special instructions", max_chars=500)
        submitted = st.form_submit_button("Place order")

    if submitted:
        flow = CheckoutFlow(client, notify, confirm_payment=hosted_widget if payment_method == HOSTED_PAYMENT_METHOD else None)
        order_number = flow.submit(
            CheckoutForm(
                delivery_address={"street": street, "city": city, "state": state, "zip_code": zip_code},
                payment_method=payment_method,
                special_instructions=instructions or None,
                promo_code=promo_code.strip() or None,
            )
        )
        if order_number:
            st.session_state["track"] = order_number
            st.session_state["page"] = "Orders"
            st.rerun()


def hosted_widget(intent: dict) -> str | None:
    """Development stand-in for the hosted card widget: the intent is confirmed server-side."""
    st.info(f"Charging {format_currency(intent['amount'])} ({intent['currency'].upper()})")
    return intent["payment_intent_id"]


def orders_page() -> None:
    tracked = st.session_state.get("track")
    if tracked:
        order = call(client.get_order, tracked)
        if order:
            render_tracking(order)
    page = call(client.list_orders, limit=20) or {"items": []}
    for order in page["items"]:
        label = map_order_status(order["status"])
        with st.expander(f"{order['order_number']} · :{status_color(order['status'])}[{label}] · {format_currency(order['total_price'])}"):
            st.caption(format_timestamp(order["created_at"]))
            for item in order["items"]:
                st.write(f"{item['name']} × {item['quantity']}")
            if st.button("Track", key=f"track_{order['id']}"):
                st.session_state["track"] = order["order_number"]
                st.rerun()
            if can_cancel(order["status"]) and st.button("Cancel order", key=f"cancel_{order['id']}"):
                if call(client.cancel_order, order["order_number"]):
                    notify("success", "Order cancelled")
                    st.rerun()


def render_tracking(order: dict) -> None:
    st.subheader(f"Tracking {order['order_number']}")
    label = map_order_status(order["status"])
    step = tracking_step(order["status"])
    if step < 0:
        st.error(f"Status: {label}")
        return
    st.progress(tracking_progress(order["status"]) / 100)
    columns = st.columns(len(TRACKING_STEPS))
    for index, (column, name) in enumerate(zip(columns, TRACKING_STEPS)):
        column.markdown(f"**{name}**" if index == step else name)


if not client.credentials.is_authenticated:
    st.sidebar.info("Log in to order")
    login_panel()
    st.stop()

user = client.credentials.user or {}
st.sidebar.write(f"Hello, {user.get('name', 'guest')}")
if st.sidebar.button("Logout"):
    call(client.logout)
    st.rerun()

pages = {"Menu": menu_page, "Cart": cart_page, "Orders": orders_page}
current = st.session_state.get("page") if st.session_state.get("page") in pages else "Menu"
choice = st.sidebar.radio("Go to", list(pages), index=list(pages).index(current))
st.session_state["page"] = choice
pages[choice]()
