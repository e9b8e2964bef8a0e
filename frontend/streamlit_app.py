import os
import sys
from pathlib import Path

# Ensure repo root is importable (works regardless of cwd)
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import streamlit as st

from frontend.client import ChatClient

st.set_page_config(page_title="MoodChat", page_icon="💬", layout="centered")
st.title("MoodChat")
st.caption("Each of your messages is tagged with the emotion the backend detected in it.")

with st.sidebar:
    backend_url = st.text_input("Backend URL", value=os.getenv("BACKEND_URL", "http://localhost:3000"))
    if st.button("Clear history", use_container_width=True):
        st.session_state.pop("chat", None)
        if "client" in st.session_state:
            _, err = st.session_state.client.clear()
            if err:
                st.warning(err)

if "client" not in st.session_state or st.session_state.client.base_url != backend_url.rstrip("/"):
    st.session_state.client = ChatClient(backend_url)
    st.session_state.chat = []
if "chat" not in st.session_state:
    st.session_state.chat = []

for m in st.session_state.chat:
    with st.chat_message(m["role"]):
        st.markdown(m["text"])
        if m.get("emotion"):
            st.caption(f"emotion: {m['emotion']}")

msg = st.chat_input("Type a message...")
if msg:
    st.session_state.chat.append({"role": "user", "text": msg})
    data, error = st.session_state.client.send(msg)
    if error:
        st.session_state.chat.append({"role": "assistant", "text": f"⚠️ {error}"})
    else:
        # the label describes the user's message
        st.session_state.chat[-1]["emotion"] = data.get("emotion")
        st.session_state.chat.append({"role": "assistant", "text": data.get("reply", "")})
    st.rerun()
