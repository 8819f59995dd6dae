# app/ui/login.py

import os
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager
from services.api import get_user_info, login_user, signup_user

load_dotenv()

COOKIE_PASSWORD = os.getenv("COOKIE_PASSWORD")

cookies = EncryptedCookieManager(password=COOKIE_PASSWORD)
if not cookies.ready():
    st.stop()


def logout():
    cookies.clear()
    cookies.save()


def remember(token, username):
    profile = get_user_info(token)
    # the server stores a sanitized username, show that one
    username = profile.get("username", username)
    st.session_state["access_token"] = token
    st.session_state["username"] = username
    st.session_state["admin"] = bool(profile.get("admin"))
    cookies["access_token"] = token
    cookies["username"] = username
    cookies.save()


def login_page():
    st.title("🔐 Log in")

    if "access_token" not in st.session_state and "access_token" in cookies:
        profile = get_user_info(cookies["access_token"])
        # a stale cookie means an expired token, fall through to the form
        if not profile.get("error"):
            st.session_state["access_token"] = cookies["access_token"]
            st.session_state["username"] = profile["username"]
            st.session_state["admin"] = profile["admin"]
            st.rerun()

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form()
    else:
        show_login_form()


def show_login_form():
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")

    if submitted:
        with st.spinner("Logging in..."):
            result = login_user(username, password)
            if result.get("error"):
                st.error(f"❌ Login failed: {result['error']}")
            else:
                remember(result["token"], username)
                st.success("✅ Logged in!")
                st.rerun()

    if st.button("Sign up"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form():
    st.subheader("📝 Sign up")

    new_user = st.text_input("Username", key="new_user")
    new_pass = st.text_input("Password", type="password", key="new_pass")

    if st.button("Create account"):
        with st.spinner("Creating account..."):
            result = signup_user(new_user, new_pass)
            if result.get("error"):
                st.error(f"❌ Sign up failed: {result['error']}")
            else:
                st.session_state["show_register"] = False
                remember(result["token"], new_user)
                st.success("🎉 Account created!")
                st.rerun()

    if st.button("← Back to log in"):
        st.session_state["show_register"] = False
        st.rerun()
