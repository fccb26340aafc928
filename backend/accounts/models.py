from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q


class User(AbstractUser):
    """
    Base login account.
    Students, HODs and guards are all users; what they may do is decided
    by the role on their Profile.
    """

    def __str__(self):
        return self.username


class Role(models.TextChoices):
    STUDENT = 'student', 'Student'
    HOD = 'hod', 'HOD'
    GUARD = 'guard', 'Guard'


class Department(models.TextChoices):
    ELECTRICAL_AND_ELECTRONICS = 'Electrical and Electronics', 'Electrical and Electronics'
    ELECTRONICS_AND_COMMUNICATION = 'Electronics and Communication', 'Electronics and Communication'
    MECHANICAL_ENGINEERING = 'Mechanical Engineering', 'Mechanical Engineering'
    TECHNOLOGY = 'Technology Department', 'Technology Department'
    COMPUTER_APPLICATION = 'Computer Application', 'Computer Application'
    COMPUTER_SCIENCE = 'Computer Science', 'Computer Science'
    BIOTECHNOLOGY = 'Biotechnology', 'Biotechnology'
    BUSINESS_ADMINISTRATION = 'Business Administration', 'Business Administration'
    APPLIED_SCIENCE_AND_HUMANITIES = 'Applied Science and Humanities', 'Applied Science and Humanities'
    PHYSICS = 'Physics Department', 'Physics Department'
    MATHEMATICS = 'Mathematics Department', 'Mathematics Department'
    MICROBIOLOGY = 'Microbiology Department', 'Microbiology Department'
    CHEMISTRY = 'Chemistry Department', 'Chemistry Department'
    PSYCHOLOGY = 'Psychology Department', 'Psychology Department'
    TRAINING_AND_PLACEMENT = 'Training and Placement', 'Training and Placement'
    LIBRARY = 'Library', 'Library'
    ADMINISTRATION = 'Administration', 'Administration'


# Persisted as text; both the ledger and the database bound it to 1..4.
YEAR_CHOICES = (
    ('1', 'Year 1'),
    ('2', 'Year 2'),
    ('3', 'Year 3'),
    ('4', 'Year 4'),
)


class Profile(models.Model):
    """Identity record for a user.

    The primary key is the user's id so a profile id and a session user id
    are interchangeable.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='profile'
    )
    name = models.CharField(max_length=150)
    roll = models.CharField(max_length=64, blank=True)
    department = models.CharField(max_length=64, choices=Department.choices)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT, db_index=True)
    year = models.CharField(max_length=1, choices=YEAR_CHOICES, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('department', 'roll')
        constraints = [
            models.CheckConstraint(
                condition=Q(year__isnull=True) | Q(year__in=['1', '2', '3', '4']),
                name='profiles_year_check',
            ),
            models.CheckConstraint(
                condition=Q(role__in=Role.values),
                name='profiles_role_check',
            ),
            models.CheckConstraint(
                condition=Q(department__in=Department.values),
                name='profiles_department_check',
            ),
            models.UniqueConstraint(
                fields=('department', 'roll'),
                condition=~Q(roll=''),
                name='profiles_roll_department_unique',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.role}, {self.department})"

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT
