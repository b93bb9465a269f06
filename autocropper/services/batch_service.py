"""Пакетная обработка: декодирование + границы, затем обрезка с отступом.

Принципы:
- Элементы пакета независимы: ошибка одного не удаляет и не портит соседей.
- Политика по умолчанию: частичный успех, ошибки собираются поэлементно
  (`BatchResult.failures`); `strict=True` включает fail-fast.
- Порядок результатов детерминирован и не зависит от порядка завершения задач.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from autocropper.models.image_model import ImageData
from autocropper.models.session_model import BatchResult, ItemFailure
from autocropper.services.compose_service import compose
from autocropper.services.errors import AutocropperError

logger = logging.getLogger(__name__)

Loader = Callable[[str], ImageData]


class BatchProcessor:
    def __init__(self, max_workers: Optional[int] = None, strict: bool = False) -> None:
        self._max_workers = max_workers
        self._strict = strict

    def detect_batch(self, names: Sequence[str], loader: Loader) -> BatchResult:
        """Загружает элементы по имени (чтение + декодирование + границы) и сортирует по имени.

        Чтение байтов выполняется внутри задачи элемента, поэтому ошибка одной
        записи архива не затрагивает остальные. Сортировка выполняется один раз
        после завершения всех задач.
        """
        names = list(names)
        outcomes = self._run([lambda n=name: loader(n) for name in names])
        result = self._collect(names, outcomes)
        images = tuple(sorted(result.images, key=lambda image: image.name))
        logger.info("Decoded %d of %d images", len(images), len(names))
        return BatchResult(images=images, failures=result.failures)

    def process_batch(self, images: Sequence[ImageData], padding: int) -> BatchResult:
        """Применяет обрезку с отступом к каждому изображению по его собственным границам.

        Порядок выходных изображений совпадает с порядком входных.
        """
        if padding < 0:
            raise ValueError(f"Отступ не может быть отрицательным: {padding}")
        names = [image.name for image in images]
        outcomes = self._run([lambda im=image: compose(im, im.bounds, padding) for image in images])
        result = self._collect(names, outcomes)
        logger.info(
            "Cropped %d of %d images with padding=%d (%d failed)",
            len(result.images), len(images), padding, len(result.failures),
        )
        return result

    # ---- Helpers ----
    def _run(self, tasks: List[Callable[[], ImageData]]) -> List[Future]:
        if not tasks:
            return []
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = [pool.submit(task) for task in tasks]
        # Executor shutdown waits for every task, so all futures are done here.
        if self._strict:
            for future in futures:
                error = future.exception()
                if error is not None:
                    raise error
        return futures

    def _collect(self, names: List[str], futures: List[Future]) -> BatchResult:
        images: List[ImageData] = []
        failures: List[ItemFailure] = []
        for name, future in zip(names, futures):
            error = future.exception()
            if error is None:
                images.append(future.result())
                continue
            if not isinstance(error, (AutocropperError, ValueError)):
                raise error
            logger.warning("Skipping %s: %s", name, error)
            failures.append(ItemFailure(name=name, error=error))
        return BatchResult(images=tuple(images), failures=tuple(failures))


def process_batch(images: Sequence[ImageData], padding: int) -> BatchResult:
    """Обёртка с политикой по умолчанию (частичный успех)."""
    return BatchProcessor().process_batch(images, padding)
