# awsnav/cli - 명령줄 인터페이스
"""
명령줄 인터페이스 (click)

Usage:
    $ awsnav                 # 대화형 브라우저
    $ awsnav ls ec2-instances
"""
