# awsnav/cli/ui - TUI 컴포넌트 (questionary, rich)
"""
대화형 화면 구성 요소

- console: Rich 콘솔 출력과 로깅 설정
- prompts: questionary 선택/확인 프롬프트
- browser: 대화형 리소스 브라우저
"""

from .console import (
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
