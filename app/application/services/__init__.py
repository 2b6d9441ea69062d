"""
Servicios de aplicación del flujo de agendamiento.

- booking_flow: controlador con el estado de una sesión
- transitions: transiciones puras del flujo
- tools.date_utils: fechas, zonas horarias y formatos en español
"""
