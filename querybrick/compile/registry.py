"""Compiler registry (Open/Closed Principle).

``CompilerFactory``
    Central registry mapping :class:`~querybrick.schema.dialect.Dialect`
    members to :class:`~querybrick.compile.base.SQLCompiler`
    implementations.  Builders look the compiler up from the dialect tag of
    their connection; a tag with no registered compiler is a hard error,
    never a silent fallback.

Usage::

    from querybrick.compile.registry import CompilerFactory

    @CompilerFactory.register(Dialect.MYSQL)
    class MySQLCompiler(SQLCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from querybrick.compile.base import SQLCompiler
from querybrick.errors import UnsupportedDialectError
from querybrick.schema.dialect import Dialect, dialect_of


class CompilerFactory:
    """Registry mapping dialect tags to :class:`SQLCompiler` classes.

    Example::

        compiler = CompilerFactory.create(Dialect.SQLITE)
        compiler.random_function()  # 'RANDOM()'
    """

    _compilers: ClassVar[dict[Dialect, type[SQLCompiler]]] = {}

    @classmethod
    def register(cls, dialect: Dialect) -> Callable[[type[SQLCompiler]], type[SQLCompiler]]:
        """Decorator that registers a compiler class under ``dialect``.

        Args:
            dialect: The dialect tag (e.g. ``Dialect.POSTGRESQL``).

        Returns:
            A decorator that registers and returns the compiler class.
        """

        def decorator(compiler_cls: type[SQLCompiler]) -> type[SQLCompiler]:
            cls._compilers[dialect] = compiler_cls
            return compiler_cls

        return decorator

    @classmethod
    def register_class(cls, dialect: Dialect, compiler_cls: type[SQLCompiler]) -> None:
        """Register a compiler class without using the decorator form."""
        cls._compilers[dialect] = compiler_cls

    @classmethod
    def create(cls, source: Any) -> SQLCompiler:
        """Instantiate the compiler for ``source``.

        Args:
            source: A :class:`Dialect`, a driver, or a connection carrying
                ``driver.id``.

        Returns:
            A fresh :class:`SQLCompiler` instance.

        Raises:
            UnsupportedDialectError: If the tag is unknown or has no compiler.
        """
        dialect = dialect_of(source)
        compiler_cls = cls._compilers.get(dialect)
        if compiler_cls is None:
            raise UnsupportedDialectError(dialect, cls.registered_dialects())
        return compiler_cls()

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(d.value for d in cls._compilers)
