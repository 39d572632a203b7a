from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.sql")

PRODUCT_COLUMNS = """
    p.Id, p.Nombre, p.Descripcion, p.Precio, p.Stock, p.CategoriaId, p.UrlVideo, p.FotoUrl,
    c.Nombre AS CategoriaNombre,
    s.Nombre AS SubcategoriaNombre
FROM Productos p
LEFT JOIN Categorias c ON p.CategoriaId = c.Id
LEFT JOIN Subcategorias s ON p.SubcategoriaId = s.Id
"""


class StoreError(RuntimeError):
    """Raised when the backing store cannot answer a query."""


class SqliteStore:
    """Read side of the catalog database.

    Every fetch_* coroutine runs its queries in a worker thread so callers on
    the event loop only suspend while the round trip is in flight.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        dirname = os.path.dirname(self.db_path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        conn = self._connect()
        try:
            with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
                conn.executescript(f.read())
            conn.commit()
        finally:
            conn.close()

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        try:
            conn = self._connect()
            try:
                rows = conn.execute(sql, params).fetchall()
                return [dict(r) for r in rows]
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Store query failed: %s", e)
            raise StoreError(str(e)) from e

    # ---------------- sync ----------------

    def _products(self) -> List[Row]:
        products = self._query(f"SELECT {PRODUCT_COLUMNS} WHERE p.EsActivo = 1")
        images = self._query("SELECT IdProducto, UrlImagen FROM ProductoImagenes ORDER BY Orden")

        gallery: Dict[Any, List[Any]] = {}
        for img in images:
            gallery.setdefault(img["IdProducto"], []).append(img["UrlImagen"])

        for p in products:
            p["Galeria"] = gallery.get(p["Id"], [])
        return products

    def _product(self, product_id: int) -> Optional[Row]:
        rows = self._query(f"SELECT {PRODUCT_COLUMNS} WHERE p.Id = ?", (product_id,))
        if not rows:
            return None
        row = rows[0]
        images = self._query(
            "SELECT UrlImagen FROM ProductoImagenes WHERE IdProducto = ? ORDER BY Orden",
            (product_id,),
        )
        row["Galeria"] = [img["UrlImagen"] for img in images]
        return row

    def _categories(self) -> List[Row]:
        return self._query(
            """
            SELECT DISTINCT c.Id, c.Nombre
            FROM Categorias c
            JOIN Productos p ON p.CategoriaId = c.Id
            WHERE c.EsActivo = 1 AND p.EsActivo = 1
            ORDER BY c.Id
            """
        )

    def _config(self) -> Optional[Row]:
        rows = self._query("SELECT NombreComercial, Telefono FROM ConfiguracionEmpresa LIMIT 1")
        return rows[0] if rows else None

    # ---------------- async ----------------

    async def fetch_products(self) -> List[Row]:
        return await asyncio.to_thread(self._products)

    async def fetch_product(self, product_id: int) -> Optional[Row]:
        return await asyncio.to_thread(self._product, product_id)

    async def fetch_categories(self) -> List[Row]:
        return await asyncio.to_thread(self._categories)

    async def fetch_config(self) -> Optional[Row]:
        return await asyncio.to_thread(self._config)
