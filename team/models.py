from django.db import models

# Create your models here.

class Team(models.Model):
    name = models.CharField(max_length=100, null=False, blank=False)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def size(self):
        return self.members.count()

    @property
    def leader(self):
        return self.members.filter(role=TeamMember.LEADER).first()


class TeamMember(models.Model):
    LEADER = 'LEADER'
    MEMBER = 'MEMBER'

    ROLE_CHOICES = [
        (LEADER, 'Leader'),
        (MEMBER, 'Member'),
    ]

    team = models.ForeignKey(Team, related_name='members', on_delete=models.CASCADE)
    user = models.ForeignKey('accounts.User', related_name='team_memberships', null=True, blank=True, on_delete=models.SET_NULL)
    name = models.CharField(max_length=100)
    email = models.EmailField()
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=MEMBER)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = ['team', 'email']
        ordering = ['position']

    def __str__(self):
        return f"{self.name} ({self.role}) in {self.team.name}"
