# uploads/uploaders/callbacks.py

import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class Callbacks:
    """
    Per-class before/after hooks around uploader lifecycle events.

    Hooks are either method names (looked up on the instance) or callables
    taking the uploader as first argument. Subclasses start from a copy of
    their parent's hooks, so registering on a subclass never leaks upwards.
    """

    _callbacks = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._callbacks = {key: list(hooks) for key, hooks in cls._callbacks.items()}

    @classmethod
    def before(cls, event, callback):
        cls._callbacks.setdefault(("before", event), []).append(callback)

    @classmethod
    def after(cls, event, callback):
        cls._callbacks.setdefault(("after", event), []).append(callback)

    @classmethod
    def callbacks(cls, kind, event):
        return list(cls._callbacks.get((kind, event), []))

    def _run_callbacks(self, kind, event, *args):
        for callback in self.callbacks(kind, event):
            if isinstance(callback, str):
                getattr(self, callback)(*args)
            else:
                callback(self, *args)

    @contextmanager
    def with_callbacks(self, event, *args):
        # after-hooks only run when the wrapped block completed
        self._run_callbacks("before", event, *args)
        yield
        logger.debug("%s: running after-%s hooks", type(self).__name__, event)
        self._run_callbacks("after", event, *args)
