import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from storefront.bot.handlers import router
from storefront.cart.storage import SqliteCartStorage
from storefront.config import LOG_FORMAT, settings
from storefront.services.catalog_client import CatalogClient


async def main() -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    if not settings.bot_token:
        raise RuntimeError("BOT_TOKEN is empty. Set BOT_TOKEN in .env")

    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher()
    dp.include_router(router)

    async with CatalogClient() as catalog:
        storage = SqliteCartStorage(settings.cart_db_path)
        await dp.start_polling(bot, catalog=catalog, cart_storage=storage)

if __name__ == "__main__":
    asyncio.run(main())
