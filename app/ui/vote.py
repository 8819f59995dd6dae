# app/ui/vote.py

import streamlit as st
from services.api import list_categories, next_question, vote


def vote_page():
    st.title("🗳️ Vote")

    token = st.session_state["access_token"]
    categories = list_categories(token)
    if categories.get("error"):
        st.error(categories["error"])
        return
    if not categories["items"]:
        st.info("No categories yet.")
        return

    by_name = {c["name"]: c for c in categories["items"]}
    selected = st.selectbox("Category", options=list(by_name))
    category = by_name[selected]

    question = next_question(token, category["id"])
    if question is None:
        st.success("You have answered every question in this category 🎉")
        return
    if question.get("error"):
        st.error(question["error"])
        return

    st.subheader(question["questionText"] or category["questionText"])
    left, right = st.columns(2)
    for column, item in ((left, question["firstItem"]), (right, question["secondItem"])):
        with column:
            if item.get("imageURL"):
                st.image(item["imageURL"], use_container_width=True)
            if st.button(item["name"], key=f"vote-{question['id']}-{item['id']}"):
                result = vote(token, question["id"], item["id"])
                if result.get("error"):
                    st.error(result["error"])
                else:
                    st.rerun()
