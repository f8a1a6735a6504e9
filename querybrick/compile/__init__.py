"""querybrick compilation layer: per-dialect SQL fragments."""
from querybrick.compile.base import SQLCompiler, UpsertParts
from querybrick.compile.mysql import MySQLCompiler
from querybrick.compile.postgres import PostgresCompiler
from querybrick.compile.registry import CompilerFactory
from querybrick.compile.sqlite import SQLiteCompiler

__all__ = [
    "CompilerFactory",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLCompiler",
    "SQLiteCompiler",
    "UpsertParts",
]
