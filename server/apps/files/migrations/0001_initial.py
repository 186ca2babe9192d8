import re

import django.core.validators
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
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('internal_name', models.CharField(help_text='System-generated name: {epoch_ms}_{16 hex}.{ext}', max_length=64, unique=True, validators=[django.core.validators.RegexValidator(message='Invalid internal file name format.', regex=re.compile('^\\d+_[0-9a-f]{16}\\.[a-z0-9]*$'))])),
                ('original_name', models.CharField(help_text='Sanitized, NFC-normalized name supplied by the uploader', max_length=255)),
                ('mime_type', models.CharField(help_text='MIME type reported at upload time', max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('location', models.URLField(help_text='Public URL returned by the object store', max_length=2048)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-uploaded_at'],
                'indexes': [models.Index(fields=['user', '-uploaded_at'], name='files_user_recent_idx')],
                'constraints': [models.UniqueConstraint(fields=('internal_name', 'user'), name='files_internal_name_user_unique'), models.CheckConstraint(condition=models.Q(('size_bytes__gte', 0)), name='files_size_bytes_non_negative')],
            },
        ),
    ]
