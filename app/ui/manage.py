# app/ui/manage.py

import streamlit as st
from services.api import (
    create_category,
    create_item,
    create_question,
    delete_category,
    get_category,
    list_categories,
)


def manage_page():
    st.title("🛠️ Manage")

    token = st.session_state["access_token"]

    with st.expander("➕ New category"):
        handle_category_create(token)

    categories = list_categories(token)
    if categories.get("error"):
        st.error(categories["error"])
        return
    if not categories["items"]:
        st.info("No categories yet.")
        return

    by_name = {c["name"]: c for c in categories["items"]}
    selected = st.selectbox("Category", options=list(by_name))
    handle_category(token, by_name[selected])


def handle_category_create(token):
    with st.form("create_category"):
        name = st.text_input("Name")
        description = st.text_input("Description")
        question_text = st.text_input("Question text", value="Which of these do you prefer?")
        submitted = st.form_submit_button("Create")

    if submitted:
        result = create_category(token, name, description, question_text)
        if result.get("error"):
            st.error(result["error"])
        else:
            st.success(f"Created {result['name']}")
            st.rerun()


def handle_category(token, category):
    detail = get_category(token, category["id"])
    if detail.get("error"):
        st.error(detail["error"])
        return

    st.caption(detail["description"])
    st.write(f"{len(detail['items'])} items, {detail['questionCount']} questions")
    for item in detail["items"]:
        st.markdown(f"- {item['name']}")

    with st.form("create_item"):
        name = st.text_input("Item name")
        image_url = st.text_input("Image URL (optional)")
        if st.form_submit_button("Add item"):
            result = create_item(token, name, category["id"], image_url or None)
            if result.get("error"):
                st.error(result["error"])
            else:
                st.rerun()

    if st.button("🎲 Generate question"):
        result = create_question(token, category["id"])
        if result.get("error"):
            st.error(result["error"])
        else:
            st.success(f"{result['firstItem']['name']} vs {result['secondItem']['name']}")

    if st.button("🗑️ Delete category"):
        result = delete_category(token, category["id"])
        if result.get("error"):
            st.error(result["error"])
        else:
            st.rerun()
