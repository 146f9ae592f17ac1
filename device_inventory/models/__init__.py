from .device import Device
