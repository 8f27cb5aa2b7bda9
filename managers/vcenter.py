from pyVim.connect import SmartConnect, Disconnect
from pyVmomi import vim, vmodl
import ssl
import atexit
import logging

from managers.task_waiter import TaskWaiter

logger = logging.getLogger('vcdelete.vcenter')

RETRIEVE_PAGE_SIZE = 1000


class VCenter:
    def __init__(self, host, user, password, port=443, disable_ssl_verification=False, task_timeout=None):
        self.host = host
        self.user = user
        self.password = password
        self.port = port
        self.connection = None
        self.logger = logger
        self.disable_ssl_verification = disable_ssl_verification
        self.task_timeout = task_timeout

    def connect(self):
        """Establishes a connection to the vCenter server."""
        try:
            ssl_context = None
            if self.disable_ssl_verification:
                self.logger.warning(
                    f"Connecting to {self.host} with SSL certificate verification DISABLED. "
                    "Only use this against trusted servers."
                )
                ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                ssl_context.check_hostname = False
                ssl_context.verify_mode = ssl.CERT_NONE

            self.connection = SmartConnect(host=self.host,
                                           user=self.user,
                                           pwd=self.password,
                                           port=self.port,
                                           sslContext=ssl_context)

            if self.connection:
                atexit.register(Disconnect, self.connection)
                self.logger.info(f"Connected to {self.host}:{self.port}")
            else:
                self.logger.error(f"SmartConnect returned no service instance for {self.host}.")

        except ssl.SSLCertVerificationError as ssl_verify_error:
            self.logger.error(
                f"SSL certificate verification failed for {self.host}: {ssl_verify_error}. "
                "Use --disable-ssl-verify for servers with self-signed certificates."
            )
            self.connection = None
        except vim.fault.InvalidLogin as e:
            self.logger.error(f"Invalid login credentials for {self.host}: {e.msg}")
            self.connection = None
        except ConnectionRefusedError as e:
            self.logger.error(f"Connection refused by {self.host}:{self.port}: {e}")
            self.connection = None
        except Exception as e:
            self.logger.error(f"Failed to connect to {self.host}: {e}", exc_info=True)
            self.connection = None

    def is_connected(self):
        """Checks if the service instance is connected."""
        return self.connection is not None and self.connection.content.sessionManager.currentSession is not None

    def get_content(self):
        return self.connection.RetrieveContent()

    def get_entities_by_type(self, vimtype=vim.ManagedEntity, root=None):
        """
        Builds a name -> [managed objects] map of every entity of ``vimtype``
        reachable from ``root`` (the inventory root folder by default).

        Only the ``name`` property is fetched. Results are paged through
        RetrievePropertiesEx / ContinueRetrievePropertiesEx. Entities sharing a
        name are all kept, in retrieval order.

        :param vimtype: The vim type to search for (e.g., vim.Folder).
        :param root: The container to search under.
        :return: dict of entity name to list of managed objects.
        """
        entities = {}
        for name, obj in self._iter_named_objects(vimtype, root):
            entities.setdefault(name, []).append(obj)
        return entities

    def _iter_named_objects(self, vimtype, root):
        content = self.get_content()
        if root is None:
            root = content.rootFolder
        container = content.viewManager.CreateContainerView(root, [vimtype], True)
        try:
            traversal_spec = vmodl.query.PropertyCollector.TraversalSpec(
                name='traverseEntities',
                path='view',
                skip=False,
                type=vim.view.ContainerView
            )
            property_spec = vmodl.query.PropertyCollector.PropertySpec(
                type=vimtype,
                pathSet=['name'],
                all=False
            )
            object_spec = vmodl.query.PropertyCollector.ObjectSpec(
                obj=container,
                skip=True,
                selectSet=[traversal_spec]
            )
            filter_spec = vmodl.query.PropertyCollector.FilterSpec(
                objectSet=[object_spec],
                propSet=[property_spec]
            )
            options = vmodl.query.PropertyCollector.RetrieveOptions(maxObjects=RETRIEVE_PAGE_SIZE)

            collector = content.propertyCollector
            result = collector.RetrievePropertiesEx([filter_spec], options)
            objects = []
            while result is not None:
                objects.extend(result.objects or [])
                if not result.token:
                    break
                result = collector.ContinueRetrievePropertiesEx(result.token)
        finally:
            container.Destroy()

        self.logger.debug(f"Retrieved {len(objects)} objects of type {getattr(vimtype, '_wsdlName', vimtype)}.")
        for object_content in objects:
            name = None
            for prop in object_content.propSet or []:
                if prop.name == 'name':
                    name = prop.val
            if name is not None:
                yield name, object_content.obj

    def task_waiter(self):
        return TaskWaiter(self.connection, timeout=self.task_timeout)
