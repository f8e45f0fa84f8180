import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StockRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(default=0, verbose_name='quantity')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='last updated at')),
                ('product', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='stock', to='catalog.product', verbose_name='product')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='last updated by')),
            ],
            options={
                'verbose_name': 'stock record',
                'verbose_name_plural': 'stock records',
                'ordering': ['-updated_at'],
                'constraints': [models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='stock_quantity_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='StockChangeEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('old_quantity', models.PositiveIntegerField(verbose_name='old quantity')),
                ('new_quantity', models.PositiveIntegerField(verbose_name='new quantity')),
                ('change_kind', models.CharField(choices=[('scheduled_morning', 'Scheduled morning count'), ('scheduled_evening', 'Scheduled evening count'), ('manual', 'Manual adjustment'), ('order_reserve', 'Order reservation'), ('order_release', 'Order cancellation release')], db_index=True, max_length=20, verbose_name='change kind')),
                ('reference', models.CharField(blank=True, db_index=True, max_length=40, verbose_name='reference')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='actor')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_changes', to='catalog.product', verbose_name='product')),
            ],
            options={
                'verbose_name': 'stock change entry',
                'verbose_name_plural': 'stock change entries',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['product', 'created_at'], name='stock_change_product_idx')],
            },
        ),
    ]
