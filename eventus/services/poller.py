import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RegistrationPoller:
    """Tarefa recorrente cancelável (cadeia de threading.Timer).

    `check` roda a cada `interval` segundos até `stop()`. Exceções em `check`
    são registradas e não interrompem o timer. `stop()` é idempotente e nenhum
    tick executa depois dele.

    Cada `start()`/`stop()` abre uma nova geração; um tick só reagenda se a
    geração em que foi criado ainda é a atual, então existe no máximo uma
    cadeia ativa.
    """

    def __init__(self, check: Callable[[], None], interval: float = 30,
                 name: str = 'registration-poller'):
        self._check = check
        self.interval = interval
        self.name = name
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False
        self._generation = 0

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._schedule(self._generation)
        logger.debug(f"[poller] {self.name} iniciado ({self.interval}s)")

    def stop(self):
        with self._lock:
            self._running = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.debug(f"[poller] {self.name} parado")

    def _schedule(self, generation: int):
        # Chamado com o lock adquirido
        timer = threading.Timer(self.interval, self._tick, args=(generation,))
        timer.daemon = True
        timer.name = self.name
        self._timer = timer
        timer.start()

    def _current(self, generation: int) -> bool:
        return self._running and self._generation == generation

    def _tick(self, generation: int):
        with self._lock:
            if not self._current(generation):
                return

        try:
            self._check()
        except Exception as e:
            logger.warning(f"[poller] {self.name}: falha na verificação: {e}")

        with self._lock:
            if self._current(generation):
                self._schedule(generation)
