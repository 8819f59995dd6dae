# app/main.py

import streamlit as st
from dotenv import load_dotenv
from ui.login import login_page, logout
from ui.manage import manage_page
from ui.vote import vote_page


load_dotenv()


def main_page():
    st.title(f"Hi, {st.session_state['username']}!")

    st.sidebar.markdown("## 📋 Menu")

    if st.sidebar.button("🗳️ Vote"):
        st.session_state["page"] = "vote"
    if st.session_state.get("admin") and st.sidebar.button("🛠️ Manage"):
        st.session_state["page"] = "manage"
    if st.sidebar.button("🔓 Log out"):
        logout()
        st.session_state.clear()
        st.rerun()

    page = st.session_state.get("page", "vote")
    if page == "manage" and st.session_state.get("admin"):
        manage_page()
    else:
        vote_page()


if "access_token" not in st.session_state:
    login_page()
else:
    main_page()
