"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events após o commit (alertas de estoque baixo)
- Varredura periódica de estoque baixo (beat)

Arquitetura:
- Broker e backend: Redis
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('sweetshop')

# Carregar configurações CELERY_* do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

# Filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
)
app.conf.task_default_queue = 'default'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks([
    'src.adapters.django_app.events',
], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    # Varrer estoque baixo a cada hora
    'check-low-stock': {
        'task': 'src.adapters.django_app.events.handlers.check_low_stock',
        'schedule': 3600.0,
    },
}
