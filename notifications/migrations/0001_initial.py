import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('message', models.CharField(max_length=500)),
                ('type', models.CharField(choices=[('order', 'Order'), ('invoice', 'Invoice'), ('payment', 'Payment'), ('inventory', 'Inventory'), ('system', 'System'), ('client', 'Client')], default='system', max_length=20)),
                ('related_id', models.PositiveBigIntegerField(blank=True, null=True)),
                ('related_type', models.CharField(blank=True, choices=[('order', 'Order'), ('invoice', 'Invoice'), ('client', 'Client'), ('material', 'Material'), ('purchase', 'Purchase')], max_length=20)),
                ('read', models.BooleanField(default=False)),
                ('read_at', models.DateTimeField(blank=True, null=True)),
                ('action_url', models.CharField(blank=True, max_length=300)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'read', '-created_at'], name='notification_unread_idx'),
                    models.Index(fields=['user', '-created_at'], name='notification_user_idx'),
                ],
            },
        ),
    ]
