"""
Configurações globais do Pytest para o Sweet Shop.

Este arquivo é carregado automaticamente pelo pytest e:
- Configura Django (SQLite em arquivo temporário, tasks Celery eager)
- Fornece fixtures compartilhadas
"""

import os
import tempfile

import pytest


def pytest_configure(config):
    """Configura Django antes da coleta dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=False,
            SECRET_KEY='test-secret-key',
            ALLOWED_HOSTS=['testserver', 'localhost'],
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                    # arquivo para que threads diferentes vejam o mesmo banco
                    'TEST': {
                        'NAME': os.path.join(
                            tempfile.gettempdir(), f'sweetshop_test_{os.getpid()}.sqlite3'
                        ),
                    },
                    'OPTIONS': {'timeout': 20, 'transaction_mode': 'IMMEDIATE'},
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.auth',
                'django.contrib.contenttypes',
                'django.contrib.sessions',
                'django.contrib.messages',
                'src.adapters.django_app.sweets.apps.SweetsConfig',
            ],
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.middleware.common.CommonMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
                'django.contrib.messages.middleware.MessageMiddleware',
            ],
            TEMPLATES=[
                {
                    'BACKEND': 'django.template.backends.django.DjangoTemplates',
                    'APP_DIRS': True,
                    'OPTIONS': {
                        'context_processors': [
                            'django.template.context_processors.request',
                            'django.contrib.auth.context_processors.auth',
                            'django.contrib.messages.context_processors.messages',
                        ],
                    },
                },
            ],
            ROOT_URLCONF='src.config.urls',
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='UTC',
            LOW_STOCK_THRESHOLD=10,
            SEARCH_DEFAULT_LIMIT=10,
            SEARCH_MAX_LIMIT=100,
            EVENT_PUBLISHER_MODE='memory',
            CELERY_BROKER_URL='memory://',
            CELERY_RESULT_BACKEND='cache+memory://',
            CELERY_TASK_ALWAYS_EAGER=True,
            CELERY_TASK_EAGER_PROPAGATES=True,
        )
        django.setup()


@pytest.fixture(autouse=True)
def reset_di_container():
    """
    Reset do container global entre testes.

    Cada teste começa com publisher e repositório novos.
    """
    from src.config.container import reset_container

    reset_container()
    yield
    reset_container()


@pytest.fixture
def sweet_repo():
    """Repositório em memória."""
    from src.core.sweets.ports import InMemorySweetRepository

    return InMemorySweetRepository()


@pytest.fixture
def catalog_sample(sweet_repo):
    """
    Catálogo de referência da busca:
    Chocolate Bar 2.99/50, Dark Chocolate 3.99/30, Gummy Bears 1.99/100,
    Caramel Candy 2.50/25, Mint Chocolate 3.50/40.
    """
    from src.core.sweets.entities import SweetEntity

    dados = [
        ("Chocolate Bar", "Milk chocolate bar", "2.99", 50),
        ("Dark Chocolate", "70% cocoa", "3.99", 30),
        ("Gummy Bears", "Fruit gummies", "1.99", 100),
        ("Caramel Candy", "Soft caramel", "2.50", 25),
        ("Mint Chocolate", "Chocolate with mint filling", "3.50", 40),
    ]
    return [
        sweet_repo.add(SweetEntity.create(name=n, description=d, price=p, stock=s))
        for n, d, p, s in dados
    ]
