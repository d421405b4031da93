from django.urls import path, include

app_name = 'thread_comments'

urlpatterns = [
    # REST API URLs
    path('api/', include('thread_comments.api.urls', namespace='api')),
]
