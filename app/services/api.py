# app/services/api.py

import os
import requests
from dotenv import load_dotenv

load_dotenv()

# Base URL of the FastAPI backend
FASTAPI_URL = os.getenv("VOTE_API_URL", "http://localhost:3000")

TIMEOUT = 10


def _headers(token):
    return {"Authorization": f"Bearer {token}"} if token else {}


def _parse(res):
    """
    Returns the JSON body on success, otherwise {"error": message}.
    """
    try:
        data = res.json()
    except ValueError:
        data = None

    if res.ok:
        return data if data is not None else {}

    if isinstance(data, dict):
        if data.get("error"):
            return {"error": data["error"]}
        if data.get("errors"):
            return {"error": "; ".join(e.get("msg", "") for e in data["errors"])}
    return {"error": f"Error: Status {res.status_code}"}


def _request(method, path, token=None, **kwargs):
    try:
        res = requests.request(
            method,
            f"{FASTAPI_URL}{path}",
            headers=_headers(token),
            timeout=TIMEOUT,
            **kwargs,
        )
    except requests.RequestException as e:
        return {"error": str(e)}
    return _parse(res)


# -------------------------------
# Authentication-related functions
# -------------------------------

def login_user(username, password):
    """
    Logs in a user and returns {"token": ...} or {"error": ...}.
    """
    return _request("POST", "/login", json={"username": username, "password": password})


def signup_user(username, password):
    return _request("POST", "/signup", json={"username": username, "password": password})


def get_user_info(token):
    """
    Retrieves the logged-in user's profile.
    """
    return _request("GET", "/users/me", token)


# -------------------------
# Voting
# -------------------------

def list_categories(token, page=1):
    return _request("GET", "/categories", token, params={"page": page})


def get_category(token, category_id):
    return _request("GET", f"/categories/{category_id}", token)


def next_question(token, category_id):
    """
    First question in the category the user has not voted on, or None.
    """
    data = _request(
        "GET", "/questions", token,
        params={"categoryId": category_id, "unanswered": "true"},
    )
    if data.get("error"):
        return data
    items = data.get("items", [])
    return items[0] if items else None


def vote(token, question_id, item_id):
    return _request("POST", f"/questions/{question_id}/vote/{item_id}", token)


# -------------------------
# Administration
# -------------------------

def create_category(token, name, description, question_text):
    payload = {"name": name, "description": description, "questionText": question_text}
    return _request("POST", "/categories", token, json=payload)


def delete_category(token, category_id):
    return _request("DELETE", f"/categories/{category_id}", token)


def create_item(token, name, category_id, image_url=None):
    payload = {"name": name, "categoryId": category_id}
    if image_url:
        payload["imageURL"] = image_url
    return _request("POST", "/items", token, json=payload)


def create_question(token, category_id):
    return _request("POST", "/questions", token, json={"categoryId": category_id})
