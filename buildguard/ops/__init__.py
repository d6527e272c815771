"""Operational checks that run against a production build."""

from buildguard.ops.runtime import RuntimeReport, run_smoke_test
from buildguard.ops.server import ServerProcess, serve_build

__all__ = ["RuntimeReport", "ServerProcess", "run_smoke_test", "serve_build"]
