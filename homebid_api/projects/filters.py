import django_filters

from .models import Project


class ProjectFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=Project.STATUS_CHOICES)
    category = django_filters.CharFilter(lookup_expr='iexact')
    location = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Project
        fields = ['status', 'category', 'location']
