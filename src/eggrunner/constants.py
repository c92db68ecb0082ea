# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants: environment variable names, defaults and well-known modules."""

from __future__ import annotations

from pathlib import Path
from typing import Final

PACKAGE_ROOT: Final[Path] = Path(__file__).resolve().parent
ASSETS_DIR: Final[Path] = PACKAGE_ROOT / "assets"
START_CLUSTER_SCRIPT: Final[Path] = ASSETS_DIR / "start_cluster.cjs"
READ_CONFIG_SCRIPT: Final[Path] = ASSETS_DIR / "read_config.cjs"

# Environment variables consumed from the invoking shell.
TEST_TIMEOUT_ENV: Final[str] = "TEST_TIMEOUT"
TEST_REPORTER_ENV: Final[str] = "TEST_REPORTER"
TESTS_ENV: Final[str] = "TESTS"
COV_EXCLUDES_ENV: Final[str] = "COV_EXCLUDES"
DEFAULT_PORT_ENV: Final[str] = "EGG_BIN_DEFAULT_PORT"
TS_COMPILER_ENV: Final[str] = "TS_COMPILER"
TYPESCRIPT_ENV: Final[str] = "EGG_TYPESCRIPT"
JB_DEBUG_FILE_ENV: Final[str] = "JB_DEBUG_FILE"
MOCHA_FILE_ENV: Final[str] = "MOCHA_FILE"
NODE_HOME_ENV: Final[str] = "EGGRUNNER_NODE_HOME"
DEBUG_ENV: Final[str] = "EGGRUNNER_DEBUG"

# Environment variables produced for the child process.
NODE_OPTIONS_ENV: Final[str] = "NODE_OPTIONS"
TS_NODE_FILES_ENV: Final[str] = "TS_NODE_FILES"
NODE_ENV_ENV: Final[str] = "NODE_ENV"
SPAWN_WRAP_SHIM_ROOT_ENV: Final[str] = "SPAWN_WRAP_SHIM_ROOT"
PREREQUIRE_ENV: Final[str] = "EGG_BIN_PREREQUIRE"
MOCHA_PARALLEL_ENV: Final[str] = "ENABLE_MOCHA_PARALLEL"
AUTO_AGENT_ENV: Final[str] = "AUTO_AGENT"
MASTER_CLOSE_TIMEOUT_ENV: Final[str] = "EGG_MASTER_CLOSE_TIMEOUT"
ETS_CWD_ENV: Final[str] = "ETS_CWD"

# Node modules resolved on behalf of the child process.
DEFAULT_TS_COMPILER: Final[str] = "ts-node/register"
TS_NODE_ESM_LOADER: Final[str] = "ts-node/esm"
MOCHA_MODULE: Final[str] = "mocha/bin/_mocha"
C8_MODULE: Final[str] = "c8/bin/c8.js"
MOCHAWESOME_MODULE: Final[str] = "mochawesome-with-mocha"
MOCHAWESOME_REGISTER_MODULE: Final[str] = "mochawesome-with-mocha/register"
MOCHAWESOME_REPORTER_OPTIONS: Final[str] = "reportDir=node_modules/.mochawesome-reports"
MOCK_REGISTER_MODULE: Final[str] = "@eggjs/mock/register"
TS_HELPER_BIN_MODULE: Final[str] = "egg-ts-helper/dist/bin.js"
TYPESCRIPT_PACKAGE: Final[str] = "typescript"
DEFAULT_FRAMEWORK: Final[str] = "egg"

# Project layout conventions.
MANIFEST_FILE: Final[str] = "package.json"
TSCONFIG_FILE: Final[str] = "tsconfig.json"
TEST_DIR: Final[str] = "test"
STANDING_EXCLUDES: Final[tuple[str, ...]] = ("!test/fixtures", "!test/node_modules")
C8_OUTPUT_DIR: Final[str] = "node_modules/.c8_output"
COVERAGE_DIR: Final[str] = "coverage"

DEFAULT_TEST_TIMEOUT: Final[str] = "60000"
DEFAULT_PORT: Final[int] = 7001
DEFAULT_C8_ARGS: Final[str] = (
    "--temp-directory node_modules/.c8_output -r text-summary -r json-summary -r json -r lcov -r cobertura"
)
DEFAULT_COVERAGE_EXCLUDES: Final[tuple[str, ...]] = (
    "example/",
    "examples/",
    "mocks**/",
    "docs/",
    "test/**",
    "test{,-*}.js",
    "**/*.test.js",
    "**/__tests__/**",
    "**/node_modules/**",
    "typings",
    "**/*.d.ts",
)

BASE_DIR_MISSING_EXIT_CODE: Final[int] = 66
RESOLUTION_ERROR_EXIT_CODE: Final[int] = 1
