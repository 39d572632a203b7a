from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from storefront.cart.engine import CartEngine
from storefront.cart.storage import CartStorage
from storefront.constants import CART_STORAGE_KEY
from storefront.services.suggestions import ProductsFetcher, SuggestionWatcher


@dataclass
class ChatSession:
    engine: CartEngine
    suggestions: SuggestionWatcher


SESSIONS: Dict[int, ChatSession] = {}  # chat_id -> session


def get_session(chat_id: int, storage: CartStorage, fetch_products: ProductsFetcher) -> ChatSession:
    session = SESSIONS.get(chat_id)
    if session is None:
        engine = CartEngine(storage, key=f"{CART_STORAGE_KEY}:{chat_id}")
        session = ChatSession(engine=engine, suggestions=SuggestionWatcher(engine, fetch_products))
        SESSIONS[chat_id] = session
    return session
