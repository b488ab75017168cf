import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


def marks_field(max_marks):
    return models.DecimalField(
        decimal_places=2,
        default=Decimal('0'),
        max_digits=5,
        validators=[
            django.core.validators.MinValueValidator(0),
            django.core.validators.MaxValueValidator(max_marks),
        ],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academic', '0001_initial'),
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ExamRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('semester', models.CharField(max_length=50)),
                ('year', models.IntegerField(validators=[django.core.validators.MinValueValidator(1900), django.core.validators.MaxValueValidator(3000)])),
                ('mid_exam', marks_field(20)),
                ('final_exam', marks_field(40)),
                ('assessment', marks_field(10)),
                ('project', marks_field(10)),
                ('assignment', marks_field(10)),
                ('presentation', marks_field(10)),
                ('total_marks', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=6)),
                ('grade', models.CharField(blank=True, max_length=2)),
                ('grade_points', models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='exam_records', to='academic.course')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exam_records', to='students.student')),
            ],
            options={
                'verbose_name': 'Exam Record',
                'verbose_name_plural': 'Exam Records',
                'db_table': 'exam_records',
                'ordering': ['-year', 'semester', 'student__first_name'],
                'unique_together': {('student', 'course', 'semester', 'year')},
            },
        ),
    ]
