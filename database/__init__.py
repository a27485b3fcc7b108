"""
DATABASE PACKAGE

Lớp lưu trữ SQLite cho backend: users + totps.
Core không phụ thuộc package này; backend gọi save/list/delete sau khi parse.
"""
