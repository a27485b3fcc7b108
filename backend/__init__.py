"""
BACKEND PACKAGE INITIALIZATION FILE

Backend package cho TOTP Manager dùng Flask.
Gọi các hàm trong core để import QR / sinh mã, lưu trữ qua database.

Chạy server:
    flask --app backend.app run
"""

from .app import create_app

__all__ = ['create_app']
