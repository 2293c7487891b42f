from django.contrib import admin
from django.urls import path

from projecthub.accounts import views as account_views
from projecthub.core import views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', views.home, name='home'),
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('profile/', views.profile_view, name='profile'),
    path('profile/two-factor/', views.two_factor_settings, name='two-factor.update'),
    path('verify/', account_views.verify_create, name='verify.create'),
    path('verify/submit/', account_views.verify_store, name='verify.store'),
    path('verify/resend/', account_views.verify_resend, name='verify.resend'),
]
