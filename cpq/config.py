import os

class BaseConfig:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///cpq.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SERVICE_NAME = os.getenv('SERVICE_NAME', 'saas-cpq-api')
    PORT = int(os.getenv('PORT', '3001'))

class DevConfig(BaseConfig):
    DEBUG = True
    ENV = 'development'

class ProdConfig(BaseConfig):
    DEBUG = False
    ENV = 'production'

class TestConfig(BaseConfig):
    TESTING = True
    ENV = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
