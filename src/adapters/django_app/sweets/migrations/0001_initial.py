"""
Migration inicial para o domínio de Doces.

Cria a tabela:
- sweets: Catálogo com estoque (CHECK stock >= 0)
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='SweetModel',
            fields=[
                ('id', models.BigAutoField(
                    primary_key=True,
                    serialize=False,
                )),
                ('name', models.CharField(
                    max_length=200,
                    unique=True,
                    help_text='Nome único do doce'
                )),
                ('description', models.TextField(
                    blank=True,
                    default='',
                    help_text='Descrição do doce'
                )),
                ('price', models.DecimalField(
                    max_digits=10,
                    decimal_places=2,
                    help_text='Preço unitário'
                )),
                ('stock', models.PositiveIntegerField(
                    default=0,
                    db_index=True,
                    help_text='Quantidade disponível em estoque'
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('updated_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
            ],
            options={
                'verbose_name': 'Doce',
                'verbose_name_plural': 'Doces',
                'db_table': 'sweets',
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(stock__gte=0),
                        name='sweets_stock_non_negative',
                    ),
                ],
            },
        ),
    ]
