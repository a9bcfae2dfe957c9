"""
Motor de scheduling para sincronización periódica de inventario eShopaid → Shopify.

Ejecuta el pull de inventario del orquestador cada
INVENTORY_SYNC_INTERVAL_MINUTES. Un intervalo <= 0 deshabilita el scheduler.
Los errores se loggean y el loop continúa; no hay reintentos inmediatos.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.services.eshopaid import EShopaidSyncOrchestrator

logger = logging.getLogger(__name__)


class InventorySyncScheduler:
    """
    Scheduler del pull periódico de inventario.
    """

    def __init__(self, orchestrator: EShopaidSyncOrchestrator, interval_minutes: int):
        """
        Inicializa el scheduler.

        Args:
            orchestrator: Orquestador de sincronización
            interval_minutes: Minutos entre ejecuciones (<= 0 deshabilita)
        """
        self.orchestrator = orchestrator
        self.interval_minutes = interval_minutes
        self._task: Optional[asyncio.Task] = None
        self.last_run: Optional[datetime] = None
        self.last_result: Optional[Dict[str, Any]] = None
        self.run_count = 0

    @property
    def enabled(self) -> bool:
        """True si el intervalo habilita la sincronización periódica."""
        return self.interval_minutes > 0

    @property
    def running(self) -> bool:
        """True si el loop está activo."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Inicia el loop del scheduler (no-op si está deshabilitado o ya corriendo)."""
        if not self.enabled:
            logger.info("⏸️ Sincronización periódica de inventario deshabilitada")
            return

        if self.running:
            logger.warning("Scheduler ya está ejecutándose")
            return

        self._task = asyncio.create_task(self._loop())
        logger.info(f"🕒 Sincronización de inventario programada cada {self.interval_minutes} minutos")

    async def stop(self) -> None:
        """Detiene el loop del scheduler."""
        if not self.running:
            self._task = None
            return

        logger.info("🛑 Deteniendo scheduler")
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("✅ Scheduler detenido correctamente")

    async def run_once(self) -> Dict[str, Any]:
        """
        Ejecuta una sincronización de inventario.

        Returns:
            Dict: Resultado serializable del snapshot
        """
        logger.info("[Cron] Ejecutando sincronización programada de inventario...")
        snapshot = await self.orchestrator.trigger_inventory_sync()

        self.last_run = datetime.now(timezone.utc)
        self.run_count += 1
        self.last_result = {"success": snapshot.success, "item_count": snapshot.total_items, "error": snapshot.error}

        if snapshot.success:
            logger.info(f"[Cron] Sincronizados {snapshot.total_items} items")
        else:
            logger.error(f"[Cron] Sincronización de inventario falló: {snapshot.error}")

        return self.last_result

    async def _loop(self) -> None:
        """Loop principal del scheduler."""
        interval_seconds = self.interval_minutes * 60
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Continuar ejecutándose a pesar del error
                logger.error(f"Error en loop del scheduler: {e}")

    def get_status(self) -> Dict[str, Any]:
        """
        Obtiene el estado actual del scheduler.

        Returns:
            Dict: Estado del scheduler
        """
        return {
            "enabled": self.enabled,
            "running": self.running,
            "interval_minutes": self.interval_minutes,
            "run_count": self.run_count,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "last_result": self.last_result,
        }
