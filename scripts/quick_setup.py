#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria doces de exemplo e um administrador (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Raiz do projeto no path (pacote src)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SAMPLE_SWEETS = [
    {'name': 'Chocolate Bar', 'description': 'Milk chocolate bar', 'price': '2.99', 'stock': 50},
    {'name': 'Dark Chocolate', 'description': '70% cocoa', 'price': '3.99', 'stock': 30},
    {'name': 'Gummy Bears', 'description': 'Fruit gummies', 'price': '1.99', 'stock': 100},
    {'name': 'Caramel Candy', 'description': 'Soft caramel', 'price': '2.50', 'stock': 25},
    {'name': 'Mint Chocolate', 'description': 'Chocolate with mint filling', 'price': '3.50', 'stock': 40},
    {'name': 'Lollipop', 'description': 'Strawberry lollipop', 'price': '0.75', 'stock': 3},
]


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("Executando migrations...")
    call_command('migrate', verbosity=1)
    print("Migrations concluídas!")


def create_sample_data():
    """Cria doces de exemplo pelo mesmo use case da API."""
    from src.config.container import get_container
    from src.core.sweets.dtos import CreateSweetInputDTO
    from src.core.shared.exceptions import ConflictError

    service = get_container().create_sweet_service()

    print("Criando doces de exemplo...")

    criados = 0
    for sweet_data in SAMPLE_SWEETS:
        try:
            output = service.execute(CreateSweetInputDTO(**sweet_data))
        except ConflictError:
            print(f"   - {sweet_data['name']} já existe")
            continue
        criados += 1
        print(f"   + {output.name} ({output.price} x {output.stock})")

    print(f"{criados} doces criados!")


def create_admin(username: str, password: str):
    """Cria usuário com a capacidade de administrador (is_staff)."""
    from django.contrib.auth import get_user_model

    User = get_user_model()
    if User.objects.filter(username=username).exists():
        print(f"Administrador '{username}' já existe")
        return

    User.objects.create_user(username=username, password=password, is_staff=True)
    print(f"Administrador '{username}' criado")


def check_connection() -> bool:
    """Verifica conexão com o banco."""
    from src.adapters.django_app.shared.database import check_database_connection

    print("Verificando conexão com o banco...")

    info = check_database_connection()
    if info['healthy']:
        print(f"Conexão OK! ({info['engine']})")
    else:
        print(f"Erro de conexão ({info['engine']})")
    return info['healthy']


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Low stock threshold: {settings.LOW_STOCK_THRESHOLD}")
    print("=" * 60)
    print("\nPróximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Acesse: http://localhost:8000/api/sweets/")
    print("   3. Acesse: http://localhost:8000/admin/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar doces de exemplo e usuário admin/admin'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("Sweet Shop - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\nCertifique-se de que o banco de dados está rodando.")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()
        create_admin('admin', 'admin')

    show_info()


if __name__ == '__main__':
    main()
