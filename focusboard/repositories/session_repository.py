"""
🎯 SessionRepository - Lectura de sesiones de foco completadas

Colección append-only escrita por el subsistema de grabación de sesiones.
Este repository solo lee.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from focusboard.models.session import SessionRecord
from focusboard.repositories.base import SessionQuery

logger = logging.getLogger(__name__)


class SessionRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["sessions"]

    # ============================================
    # 📌 READ
    # ============================================

    async def query_records(self, query: SessionQuery) -> list[SessionRecord]:
        """
        Obtiene las sesiones que cumplen el filtro

        Documentos que no se pueden parsear se descartan (calidad de datos,
        no es un error).
        """
        cursor = self.collection.find(self._build_filter(query))
        docs = await cursor.to_list(length=None)

        records = []
        for doc in docs:
            try:
                records.append(SessionRecord(**doc))
            except ValidationError:
                logger.debug("Skipping malformed session document %s", doc.get("_id"))
        return records

    # ============================================
    # 📌 HELPERS
    # ============================================

    @staticmethod
    def _build_filter(query: SessionQuery) -> dict:
        """
        🔥 Traduce SessionQuery a un filtro de MongoDB

        La caja lat/lon es solo un prefiltro barato: la distancia exacta
        la decide el GeoScopeFilter.
        """
        clauses: list[dict] = []

        if query.started_after is not None:
            clauses.append({"startTime": {"$gte": query.started_after}})

        if query.was_successful is True:
            # Sin flag explícito => lo decide la regla de fallback del Aggregator
            clauses.append({
                "$or": [
                    {"wasSuccessful": True},
                    {"wasSuccessful": None},
                ]
            })
        elif query.was_successful is False:
            clauses.append({"wasSuccessful": False})

        if query.user_ids is not None:
            clauses.append({"userId": {"$in": list(query.user_ids)}})

        if query.located_only or query.bounding_box is not None:
            clauses.append({"location": {"$ne": None}})

        box = query.bounding_box
        if box is not None:
            clauses.append({
                "location.latitude": {"$gte": box.min_latitude, "$lte": box.max_latitude}
            })
            if box.min_longitude is not None and box.max_longitude is not None:
                clauses.append({
                    "location.longitude": {"$gte": box.min_longitude, "$lte": box.max_longitude}
                })

        if not clauses:
            return {}
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}
