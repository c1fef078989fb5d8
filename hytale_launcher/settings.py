from __future__ import annotations
from pathlib import Path
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from .fs_layout import Layout, build_layout

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

class Settings(BaseSettings):
    project_root: Path = Field(default=Path("."), alias="PROJECT_ROOT")
    server_executable: Path = Field(default=Path("server/Server/HytaleServer.jar"), alias="SERVER_EXECUTABLE")
    build_output_dir: Path = Field(default=Path("build/libs"), alias="BUILD_OUTPUT_DIR")
    plugin_version: str = Field(default="1.0.0", alias="PLUGIN_VERSION")
    plugin_artifact: Optional[Path] = Field(default=None, alias="PLUGIN_ARTIFACT")
    runtime_dir: Path = Field(default=Path(".server"), alias="RUNTIME_DIR")
    plugins_subdir: str = Field(default="mods", alias="PLUGINS_SUBDIR")
    assets_path: Path = Field(default=Path("server/Assets.zip"), alias="ASSETS_PATH")
    bind_address: str = Field(default="0.0.0.0:5000", alias="BIND_ADDRESS")

    java_bin: str = Field(default="java", alias="JAVA_BIN")
    jvm_args: List[str] = Field(default_factory=list, alias="JVM_ARGS")
    server_args: List[str] = Field(default_factory=list, alias="SERVER_ARGS")
    build_command: List[str] = Field(default_factory=lambda: ["./gradlew", "build"], alias="BUILD_COMMAND")
    stop_timeout: float = Field(default=10.0, alias="STOP_TIMEOUT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_dir: Optional[Path] = Field(default=Path("build/launcher-logs"), alias="LOG_DIR")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("bind_address")
    @classmethod
    def validate_bind_address(cls, v: str) -> str:
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError("bind address must look like host:port")
        if not (1 <= int(port) <= 65535):
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("plugin_version")
    @classmethod
    def validate_plugin_version(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("plugin version must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return v

    @field_validator("plugin_artifact", "log_dir", mode="before")
    @classmethod
    def empty_path_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def resolve(self, path: Path) -> Path:
        """Absolute form of ``path``; relative paths are anchored at ``project_root``."""
        path = Path(path).expanduser()
        if path.is_absolute():
            return path
        return (self.root / path).absolute()

    @property
    def root(self) -> Path:
        return self.project_root.expanduser().absolute()

    def layout(self) -> Layout:
        return build_layout(self.resolve(self.runtime_dir), self.plugins_subdir)
