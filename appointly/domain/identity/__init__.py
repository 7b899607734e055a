"""Identity domain - accounts, login and refresh tokens"""
