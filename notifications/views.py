"""Notification inbox for the authenticated user."""

from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.pagination import StandardResultsSetPagination

from .models import Notification
from .serializers import NotificationSerializer


class NotificationViewSet(mixins.ListModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """List, read and clear the caller's own notifications.

    ``GET /notifications/?filter=all|read|unread&category=<type>``
    """

    serializer_class = NotificationSerializer
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user)

    def filter_queryset(self, queryset):
        if self.action != 'list':
            return queryset
        params = self.request.query_params
        read_filter = params.get('filter', 'all')
        if read_filter == 'unread':
            queryset = queryset.filter(read=False)
        elif read_filter == 'read':
            queryset = queryset.filter(read=True)
        category = params.get('category')
        if category:
            queryset = queryset.filter(type=category)
        return queryset

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        response.data['unread_count'] = self.get_queryset().filter(read=False).count()
        return response

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({'detail': 'Notification deleted.'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        return Response({'unread_count': self.get_queryset().filter(read=False).count()})

    @action(detail=True, methods=['put'], url_path='read')
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        notification.mark_as_read()
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=['put'], url_path='mark-all-read')
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(read=False).update(read=True, read_at=timezone.now())
        return Response({'updated': updated})

    @action(detail=False, methods=['delete'], url_path='read', url_name='delete-read')
    def delete_read(self, request):
        deleted, _ = self.get_queryset().filter(read=True).delete()
        return Response({'deleted': deleted})
