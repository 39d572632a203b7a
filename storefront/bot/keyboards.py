from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup


def main_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="/catalogo"), KeyboardButton(text="/categorias")],
            [KeyboardButton(text="/carrito"), KeyboardButton(text="/pedido")],
            [KeyboardButton(text="/help")],
        ],
        resize_keyboard=True,
    )


def checkout_kb(url: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="Confirmar Pedido ➡️", url=url)]]
    )
