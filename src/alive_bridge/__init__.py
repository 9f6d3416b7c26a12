"""
Max for Live / StreamDeck → Alive Studio 브리지.

HTTP로 받은 파라미터를 OBS 현재 씬의 Alive Studio 브라우저 소스 URL에 반영한다.
"""

__version__ = "1.0.0"
