from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'thread_comments_api'

router = DefaultRouter()
router.register(r'threads', views.ThreadViewSet, basename='thread')
router.register(r'comments', views.CommentViewSet, basename='comment')

urlpatterns = [
    path('', include(router.urls)),
]
