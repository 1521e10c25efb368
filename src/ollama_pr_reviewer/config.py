"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging

from .errors import ConfigurationMissing


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class GitHubAppConfig:
    """GitHub App 설정"""
    app_id: str = ""
    webhook_secret: str = ""
    private_key_path: str = ""
    api_base_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    timeout_seconds: int = 30
    max_retries: int = 3

    def load_private_key(self) -> str:
        """서명용 개인 키 읽기"""
        key_file = Path(self.private_key_path)
        if not key_file.is_file():
            raise ConfigurationMissing(f"Private key file not found: {self.private_key_path}")

        with open(key_file, 'r', encoding='utf-8') as f:
            return f.read()


@dataclass
class OllamaConfig:
    """추론 서비스 설정"""
    base_url: str = "http://localhost:11434"
    model: str = "gemma3n:latest"
    timeout_seconds: Optional[float] = None  # None: 전송 계층 기본값 (무제한)


@dataclass
class ReviewConfig:
    """리뷰 프롬프트 설정"""
    max_patch_chars: Optional[int] = 60000  # 0 또는 None이면 자르지 않음


@dataclass
class ServerConfig:
    """웹훅 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 3000
    webhook_path: str = "/api/webhook"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubAppConfig = field(default_factory=GitHubAppConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubAppConfig(
                app_id=os.getenv("APP_ID", ""),
                webhook_secret=os.getenv("WEBHOOK_SECRET", ""),
                private_key_path=os.getenv("PRIVATE_KEY_PATH", ""),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                api_version=os.getenv("GITHUB_API_VERSION", "2022-11-28"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
                max_retries=int(os.getenv("GITHUB_MAX_RETRIES", "3")),
            ),
            ollama=OllamaConfig(
                base_url=os.getenv("OLLAMA_URL", "http://localhost:11434"),
                model=os.getenv("OLLAMA_MODEL", "gemma3n:latest"),
                timeout_seconds=_optional_float(os.getenv("OLLAMA_TIMEOUT")),
            ),
            review=ReviewConfig(
                max_patch_chars=int(os.getenv("MAX_PATCH_CHARS", "60000")),
            ),
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "3000")),
                webhook_path=os.getenv("WEBHOOK_PATH", "/api/webhook"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            github=GitHubAppConfig(**config_data.get('github', {})),
            ollama=OllamaConfig(**config_data.get('ollama', {})),
            review=ReviewConfig(**config_data.get('review', {})),
            server=ServerConfig(**config_data.get('server', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub App 필수 값 확인
        if not self.github.app_id:
            errors.append("APP_ID is required")
        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET is required")
        if not self.github.private_key_path:
            errors.append("PRIVATE_KEY_PATH is required")
        elif not Path(self.github.private_key_path).is_file():
            errors.append(f"Private key file not found: {self.github.private_key_path}")

        if not self.ollama.model:
            errors.append("Ollama model is required")

        if self.review.max_patch_chars is not None and self.review.max_patch_chars < 0:
            errors.append("max_patch_chars must be non-negative")

        if not 0 < self.server.port < 65536:
            errors.append(f"Invalid port: {self.server.port}")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigurationMissing(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'app_id': self.github.app_id,
                'private_key_path': self.github.private_key_path,
                'api_base_url': self.github.api_base_url,
                'api_version': self.github.api_version,
                'timeout_seconds': self.github.timeout_seconds,
                'max_retries': self.github.max_retries,
                # 보안상 웹훅 시크릿은 제외
            },
            'ollama': {
                'base_url': self.ollama.base_url,
                'model': self.ollama.model,
                'timeout_seconds': self.ollama.timeout_seconds,
            },
            'review': {
                'max_patch_chars': self.review.max_patch_chars,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'webhook_path': self.server.webhook_path,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))

        # 루트 로거에 핸들러 추가
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """설정 로드 후 검증 (실패 시 ConfigurationMissing)"""
    try:
        config = AppConfig.from_yaml(config_path) if config_path else AppConfig.from_env()
    except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError) as e:
        raise ConfigurationMissing(f"Invalid configuration: {e}") from e
    config.validate()
    return config
