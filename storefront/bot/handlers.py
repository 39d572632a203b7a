from __future__ import annotations

from html import escape
from typing import Dict, List

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from storefront.bot.keyboards import checkout_kb, main_kb
from storefront.bot.states import ChatSession, get_session
from storefront.cart.storage import CartStorage
from storefront.config import settings
from storefront.models import CartLine, Product
from storefront.services.browse import categories_with_products, filter_products, group_by_category
from storefront.services.catalog_client import CatalogClient, CatalogError, ProductNotFoundError
from storefront.services.checkout import build_checkout_url
from storefront.utils.formatters import format_price
from storefront.utils.validators import parse_quantity, require_product_id

router = Router()

MAX_MESSAGE_LEN = 4000
CONNECTION_ERROR = "❌ No se pudo cargar el catálogo. Revisa tu conexión e intenta de nuevo."


def _session(message: Message, storage: CartStorage, catalog: CatalogClient) -> ChatSession:
    return get_session(message.chat.id, storage, catalog.get_products)


def _clip(text: str) -> str:
    """Cuts on line boundaries so no HTML tag is left open."""
    if len(text) <= MAX_MESSAGE_LEN:
        return text
    kept: List[str] = []
    size = 0
    for line in text.split("\n"):
        if size + len(line) + 1 > MAX_MESSAGE_LEN - 1:
            break
        kept.append(line)
        size += len(line) + 1
    return "\n".join(kept) + "\n…"


def _product_line(p: Product) -> str:
    status = "" if p.available else " <i>(agotado)</i>"
    return f"• <code>{escape(p.id)}</code> {escape(p.name)} — {format_price(p.price)}{status}"


def catalog_text(grouped: Dict[str, List[Product]]) -> str:
    if not grouped:
        return "No hay productos disponibles."
    lines: List[str] = []
    for name, products in grouped.items():
        lines.append(f"<b>{escape(name)}</b>")
        lines.extend(_product_line(p) for p in products)
        lines.append("")
    return "\n".join(lines).strip()


def product_text(p: Product) -> str:
    lines = [f"<b>{escape(p.name)}</b>", format_price(p.price)]
    if p.category_name:
        lines.append(escape(" / ".join(x for x in (p.category_name, p.sub_category_name) if x)))
    if p.description:
        lines.append("")
        lines.append(escape(p.description))
    lines.append("")
    lines.append(f"Stock: {p.stock}" if p.available else "Agotado")
    if p.video_url:
        lines.append(f"Video: {escape(p.video_url)}")
    lines.append(f"Agregar: /agregar {escape(p.id)}")
    return "\n".join(lines)


def cart_text(lines: List[CartLine], total: float, count: int, suggestions: List[Product]) -> str:
    if not lines:
        return "🛍 Tu carrito está vacío. Mira el catálogo: /catalogo"
    out = [f"<b>🛍 Mi Carrito</b> ({len(lines)} productos, {count} unidades)", ""]
    for line in lines:
        out.append(
            f"• <code>{escape(line.id)}</code> {escape(line.name)}\n"
            f"   {line.quantity} x {format_price(line.price)}"
        )
    out.append("")
    out.append(f"<b>Total: {format_price(total)}</b>")
    if suggestions:
        out.append("")
        out.append("<b>⚠️ ¿Olvidaste la memoria?</b>")
        out.extend(f"{_product_line(p)} → /agregar {escape(p.id)}" for p in suggestions)
    out.append("")
    out.append("Confirmar: /pedido · Vaciar: /vaciar")
    return "\n".join(out)


async def _answer_cart(message: Message, session: ChatSession) -> None:
    suggestions = await session.suggestions.wait()
    engine = session.engine
    await message.answer(
        _clip(cart_text(engine.lines, engine.get_cart_total(), engine.get_cart_count(), suggestions))
    )


@router.message(Command("start"))
async def cmd_start(message: Message, catalog: CatalogClient):
    config = await catalog.get_config()
    await message.answer(
        f"👋 Bienvenido a <b>{escape(config.app_name)}</b>.\nMira el catálogo con /catalogo",
        reply_markup=main_kb(),
    )


@router.message(Command("help"))
async def cmd_help(message: Message):
    text = (
        "<b>Comandos</b>\n\n"
        "/catalogo — productos por categoría\n"
        "/catalogo TEXTO — buscar productos\n"
        "/categorias — lista de categorías\n"
        "/producto ID — detalle de un producto\n\n"
        "<b>Carrito</b>\n"
        "/agregar ID — agregar 1 unidad\n"
        "/cantidad ID N — fijar cantidad (0 lo quita)\n"
        "/quitar ID — quitar del carrito\n"
        "/carrito — ver carrito\n"
        "/vaciar — vaciar carrito\n"
        "/pedido — enviar pedido por WhatsApp\n"
    )
    await message.answer(text)


@router.message(Command("catalogo"))
async def cmd_catalog(message: Message, command: CommandObject, catalog: CatalogClient):
    try:
        products = await catalog.get_products()
        categories = await catalog.get_categories()
    except CatalogError:
        await message.answer(CONNECTION_ERROR)
        return

    search = (command.args or "").strip()
    if search:
        found = filter_products(products, search=search)
        if not found:
            await message.answer(f"Sin resultados para «{escape(search)}».")
            return
        await message.answer(_clip(catalog_text({f"Resultados: {search}": found})))
        return

    grouped = group_by_category(products, categories_with_products(categories, products))
    await message.answer(_clip(catalog_text(grouped)))


@router.message(Command("categorias"))
async def cmd_categories(message: Message, catalog: CatalogClient):
    try:
        products = await catalog.get_products()
        categories = categories_with_products(await catalog.get_categories(), products)
    except CatalogError:
        await message.answer(CONNECTION_ERROR)
        return
    if not categories:
        await message.answer("No hay categorías.")
        return
    lines = ["<b>Categorías:</b>"]
    for c in sorted(categories, key=lambda c: c.name):
        lines.append(f"• {escape(c.name)}")
    await message.answer("\n".join(lines))


@router.message(Command("producto"))
async def cmd_product(message: Message, command: CommandObject, catalog: CatalogClient):
    try:
        product_id = require_product_id(command.args or "")
        product = await catalog.get_product(product_id)
    except ValueError as e:
        await message.answer(f"Uso: /producto ID ({e})")
        return
    except ProductNotFoundError:
        await message.answer("Producto no encontrado")
        return
    except CatalogError:
        await message.answer(CONNECTION_ERROR)
        return
    await message.answer(product_text(product))


@router.message(Command("agregar"))
async def cmd_add(
    message: Message, command: CommandObject, catalog: CatalogClient, cart_storage: CartStorage
):
    try:
        product_id = require_product_id(command.args or "")
        product = await catalog.get_product(product_id)
    except ValueError as e:
        await message.answer(f"Uso: /agregar ID ({e})")
        return
    except ProductNotFoundError:
        await message.answer("Producto no encontrado")
        return
    except CatalogError:
        await message.answer(CONNECTION_ERROR)
        return

    session = _session(message, cart_storage, catalog)
    session.engine.add_to_cart(product)
    await message.answer(f"✅ Agregado: {escape(product.name)}")
    await _answer_cart(message, session)


@router.message(Command("cantidad"))
async def cmd_quantity(
    message: Message, command: CommandObject, catalog: CatalogClient, cart_storage: CartStorage
):
    parts = (command.args or "").split()
    try:
        if len(parts) != 2:
            raise ValueError("se esperan ID y cantidad")
        product_id = require_product_id(parts[0])
        quantity = parse_quantity(parts[1])
    except ValueError as e:
        await message.answer(f"Uso: /cantidad ID N ({e})")
        return

    session = _session(message, cart_storage, catalog)
    session.engine.update_quantity(product_id, quantity)
    await _answer_cart(message, session)


@router.message(Command("quitar"))
async def cmd_remove(
    message: Message, command: CommandObject, catalog: CatalogClient, cart_storage: CartStorage
):
    try:
        product_id = require_product_id(command.args or "")
    except ValueError as e:
        await message.answer(f"Uso: /quitar ID ({e})")
        return
    session = _session(message, cart_storage, catalog)
    session.engine.remove_from_cart(product_id)
    await _answer_cart(message, session)


@router.message(Command("carrito"))
async def cmd_cart(message: Message, catalog: CatalogClient, cart_storage: CartStorage):
    session = _session(message, cart_storage, catalog)
    if not session.engine.is_empty():
        await session.suggestions.refresh()
    await _answer_cart(message, session)


@router.message(Command("vaciar"))
async def cmd_clear(message: Message, catalog: CatalogClient, cart_storage: CartStorage):
    session = _session(message, cart_storage, catalog)
    session.engine.clear_cart()
    await message.answer("🗑 Carrito vaciado.")


@router.message(Command("pedido"))
async def cmd_checkout(message: Message, catalog: CatalogClient, cart_storage: CartStorage):
    session = _session(message, cart_storage, catalog)
    if session.engine.is_empty():
        await message.answer("🛍 Tu carrito está vacío. Mira el catálogo: /catalogo")
        return

    config = await catalog.get_config()
    number = config.whatsapp_number or settings.default_whatsapp_number
    url = build_checkout_url(session.engine.lines, number)
    await message.answer(
        f"<b>Resumen del pedido</b>\nTotal: {format_price(session.engine.get_cart_total())}\n\n"
        "Al confirmar, serás redirigido a WhatsApp con el detalle de tu pedido.",
        reply_markup=checkout_kb(url),
    )
