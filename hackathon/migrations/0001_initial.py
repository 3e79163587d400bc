import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('team', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Hackathon',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(choices=[('WEB_DEVELOPMENT', 'Web Development'), ('MOBILE_DEVELOPMENT', 'Mobile Development'), ('AI_ML', 'AI / ML'), ('BLOCKCHAIN', 'Blockchain'), ('DATA_SCIENCE', 'Data Science'), ('CYBERSECURITY', 'Cybersecurity'), ('OPEN_INNOVATION', 'Open Innovation')], default='WEB_DEVELOPMENT', max_length=30)),
                ('banner_image', models.URLField(blank=True, max_length=500)),
                ('logo_image', models.URLField(blank=True, max_length=500)),
                ('rules', models.TextField(blank=True, help_text='Enter hackathon rules (one per line or as formatted text)')),
                ('venue', models.CharField(blank=True, max_length=100)),
                ('is_virtual', models.BooleanField(default=False)),
                ('prize_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('registration_start', models.DateTimeField()),
                ('registration_end', models.DateTimeField()),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('submission_deadline', models.DateTimeField()),
                ('min_team_size', models.IntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(100)], verbose_name='minimum team size')),
                ('max_team_size', models.IntegerField(default=5, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(100)], verbose_name='maximum team size')),
                ('allow_individual', models.BooleanField(default=True)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('UPCOMING', 'Upcoming'), ('PUBLISHED', 'Published'), ('LIVE', 'Live'), ('COMPLETED', 'Completed'), ('REJECTED', 'Rejected'), ('CANCELLED', 'Cancelled')], default='DRAFT', max_length=10)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('contact_person', models.CharField(blank=True, max_length=100)),
                ('contact_phone', models.CharField(blank=True, max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organizer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='organized_hackathons', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', '-created_at'], name='hack_status_idx'), models.Index(fields=['organizer', '-created_at'], name='hack_organizer_idx')],
            },
        ),
        migrations.CreateModel(
            name='Track',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('document_url', models.URLField(blank=True, max_length=500)),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tracks', to='hackathon.hackathon')),
            ],
            options={
                'ordering': ['number'],
                'unique_together': {('hackathon', 'number')},
            },
        ),
        migrations.CreateModel(
            name='CreationPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('payment_id', models.CharField(max_length=100)),
                ('provider_payment_id', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('hackathon', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='creation_payment', to='hackathon.hackathon')),
                ('host', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='creation_payments', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Registration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_type', models.CharField(choices=[('INDIVIDUAL', 'Individual'), ('TEAM', 'Team')], default='TEAM', max_length=10)),
                ('registered_at', models.DateTimeField()),
                ('hackathon', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='hackathon.hackathon')),
                ('team', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='registration', to='team.team')),
                ('track', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='registrations', to='hackathon.track')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hackathon_registrations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Hackathon Registration',
                'verbose_name_plural': 'Hackathon Registrations',
                'unique_together': {('hackathon', 'user')},
            },
        ),
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(blank=True, max_length=100)),
                ('description', models.TextField(blank=True)),
                ('repository_url', models.URLField(blank=True, verbose_name='repository url')),
                ('demo_url', models.URLField(blank=True, verbose_name='demo video link')),
                ('presentation_url', models.URLField(blank=True, verbose_name='presentation link')),
                ('is_draft', models.BooleanField(default=True)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('registration', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='submission', to='hackathon.registration')),
            ],
        ),
    ]
