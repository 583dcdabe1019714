from __future__ import annotations


class PipelineError(Exception):
    """집계 파이프라인에서 발생하는 모든 오류의 기반 클래스."""

    kind = "error"

    def __init__(self, message: str = "", *, service: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.service = service

    def to_note(self) -> str:
        safe = (self.message or "").replace("\n", " ").replace("|", " ").strip()
        prefix = f"{self.service}:{self.kind}" if self.service else self.kind
        return f"{prefix}:{safe}" if safe else prefix


class ConfigurationError(PipelineError):
    """필수 설정(피드 API 키) 누락. 파이프라인을 시작할 수 없다."""

    kind = "configuration"


class TransportError(PipelineError):
    """네트워크/HTTP 실패. 항상 복구 가능."""

    kind = "transport"

    def __init__(self, message: str = "", *, service: str = "", status: int = 0, timeout: bool = False) -> None:
        super().__init__(message, service=service)
        self.status = status
        self.timeout = timeout
        if timeout:
            self.kind = "timeout"


class ParseError(PipelineError):
    """응답 형태가 예상과 다름. TransportError와 동일하게 취급한다."""

    kind = "parse"
